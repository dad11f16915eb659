# backend/creatoraide/api/notifications.py
"""API endpoints for the caller's notifications."""
from fastapi import APIRouter, Query, status

from creatoraide.api.deps import DBSession, CurrentIdentity
from creatoraide.schemas.notification import (
    NotificationResponse,
    NotificationList,
    NotificationMarkRead,
)
from creatoraide.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationList)
def get_notifications(
    db: DBSession,
    identity: CurrentIdentity,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    unread_only: bool = Query(False),
):
    """Get the caller's notifications, newest first."""
    service = NotificationService(db)
    notifications, total, unread_count = service.get_user_notifications(
        user_id=identity.user_id,
        limit=limit,
        offset=offset,
        unread_only=unread_only,
    )

    return NotificationList(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        total=total,
        unread_count=unread_count,
    )


@router.post("/read", status_code=status.HTTP_200_OK)
def mark_notifications_read(
    data: NotificationMarkRead,
    db: DBSession,
    identity: CurrentIdentity,
):
    service = NotificationService(db)
    count = service.mark_as_read(data.notification_ids, identity.user_id)
    db.commit()

    return {"marked_read": count}


@router.post("/read-all", status_code=status.HTTP_200_OK)
def mark_all_notifications_read(
    db: DBSession,
    identity: CurrentIdentity,
):
    service = NotificationService(db)
    count = service.mark_all_as_read(identity.user_id)
    db.commit()

    return {"marked_read": count}
