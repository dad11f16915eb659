# backend/creatoraide/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from creatoraide.config import get_settings
from creatoraide.api.onboarding import router as onboarding_router
from creatoraide.api.notifications import router as notifications_router

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events for startup and shutdown."""
    from creatoraide.database import get_engine
    from creatoraide.models import Base
    from creatoraide.services.step_catalog import get_step_catalog

    catalog = get_step_catalog()
    logger.info(f"Loaded onboarding catalog with {len(catalog)} steps")

    if settings.progress_backend == "database":
        try:
            Base.metadata.create_all(bind=get_engine())
        except Exception as e:
            logger.warning(f"Table creation skipped: {e}")

    logger.info(f"Onboarding progress backend: {settings.progress_backend}")

    yield

    logger.info("Shutting down")


API_DESCRIPTION = """
# CreatorAIDE - Onboarding Service

Tracks each creator's progress through the dashboard tour.

## Concepts

- **Step**: One stop of the tour, ordered by `order`, worth `points`
- **Progress**: A user's current step, completed steps, points and badges
- **Badge**: An achievement earned from progress thresholds

## Authentication

Onboarding and notification endpoints require a bearer token from the
identity provider in the `Authorization` header: `Bearer <token>`
"""

app = FastAPI(
    title=settings.app_name,
    description=API_DESCRIPTION,
    version=settings.app_version,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "onboarding", "description": "Onboarding tour progress and badges"},
        {"name": "notifications", "description": "Onboarding notifications for the current user"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(onboarding_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    return {"status": "healthy", "app": settings.app_name}


@app.get("/api/v1/version")
async def get_version():
    """Return application version information."""
    return {
        "version": settings.app_version,
        "commit": settings.git_commit,
        "api_version": "v1",
        "app_name": settings.app_name,
    }
