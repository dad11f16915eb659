# backend/creatoraide/api/deps.py
from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from creatoraide.config import get_settings
from creatoraide.database import get_db
from creatoraide.services.notification_service import (
    LoggingNotificationSink,
    NotificationService,
    NotificationSink,
)
from creatoraide.services.onboarding_controller import OnboardingController, RecordingRouter
from creatoraide.services.persistence import build_key_value_store
from creatoraide.services.progress_store import ProgressStore
from creatoraide.services.step_catalog import StepCatalog, get_step_catalog
from creatoraide.utils.security import decode_access_token

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """What the identity provider tells us about the caller."""
    user_id: Optional[str]
    is_authenticated: bool


def get_identity(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> Identity:
    """Decode the bearer token, if any, into an Identity."""
    if credentials is None:
        return Identity(user_id=None, is_authenticated=False)

    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        return Identity(user_id=None, is_authenticated=False)
    return Identity(user_id=user_id, is_authenticated=True)


def get_current_identity(identity: Annotated[Identity, Depends(get_identity)]) -> Identity:
    """Require an authenticated caller."""
    if not identity.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


DBSession = Annotated[Session, Depends(get_db)]

CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]

Catalog = Annotated[StepCatalog, Depends(get_step_catalog)]


def get_progress_store(db: DBSession, catalog: Catalog) -> ProgressStore:
    settings = get_settings()
    backend = build_key_value_store(
        settings.progress_backend,
        db=db,
        redis_url=settings.redis_url,
    )
    return ProgressStore(backend, catalog, key_prefix=settings.progress_key_prefix)


Store = Annotated[ProgressStore, Depends(get_progress_store)]


def get_notification_sink(db: DBSession) -> NotificationSink:
    if get_settings().notification_sink == "log":
        return LoggingNotificationSink()
    return NotificationService(db)


def get_onboarding_controller(
    identity: CurrentIdentity,
    store: Store,
    notifier: Annotated[NotificationSink, Depends(get_notification_sink)],
) -> OnboardingController:
    """Build a controller for the caller, loaded from their persisted progress."""
    return OnboardingController(
        user_id=identity.user_id,
        store=store,
        notifier=notifier,
        router=RecordingRouter(),
    )


Controller = Annotated[OnboardingController, Depends(get_onboarding_controller)]
