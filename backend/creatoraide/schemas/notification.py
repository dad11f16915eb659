# backend/creatoraide/schemas/notification.py
"""Schemas for user notifications."""
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from pydantic import BaseModel

from creatoraide.models.notification import NotificationType, NotificationSeverity


class NotificationResponse(BaseModel):
    """Schema for notification response."""
    id: UUID
    notification_type: NotificationType
    title: str
    message: str
    severity: NotificationSeverity
    user_id: str
    read_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationList(BaseModel):
    """Paginated list of notifications."""
    notifications: List[NotificationResponse]
    total: int
    unread_count: int


class NotificationMarkRead(BaseModel):
    """Schema for marking notifications as read."""
    notification_ids: List[UUID]
