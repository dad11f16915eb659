# backend/creatoraide/services/notification_service.py
"""Notification sinks for onboarding events and the user notification inbox."""
import logging
from datetime import datetime, timezone
from typing import List, Protocol, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from creatoraide.models.notification import Notification, NotificationType, NotificationSeverity

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    def notify(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        severity: NotificationSeverity = NotificationSeverity.INFO,
    ) -> None:
        ...


class LoggingNotificationSink:
    """Sink that only writes notifications to the application log."""

    def notify(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        severity: NotificationSeverity = NotificationSeverity.INFO,
    ) -> None:
        level = logging.WARNING if severity == NotificationSeverity.WARNING else logging.INFO
        logger.log(level, f"[{notification_type.value}] {user_id}: {title} - {message}")


class NotificationService:
    """Service for storing and querying a user's notifications."""

    def __init__(self, db: Session):
        self.db = db

    def create_notification(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        severity: NotificationSeverity = NotificationSeverity.INFO,
    ) -> Notification:
        """Create a new notification for a user.

        Args:
            user_id: Identity provider user id
            notification_type: Type of notification
            title: Short title for the notification
            message: Full message text
            severity: Severity level (info, warning, error, success)

        Returns:
            Created Notification instance
        """
        notification = Notification(
            notification_type=notification_type,
            title=title,
            message=message,
            severity=severity,
            user_id=user_id,
        )
        self.db.add(notification)
        self.db.flush()
        return notification

    def notify(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        severity: NotificationSeverity = NotificationSeverity.INFO,
    ) -> None:
        """Fire-and-forget delivery; storage failures are logged and dropped."""
        try:
            self.create_notification(user_id, notification_type, title, message, severity)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.warning(f"Failed to store notification for {user_id}: {e}")

    def get_user_notifications(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        unread_only: bool = False,
    ) -> Tuple[List[Notification], int, int]:
        """Get a user's notifications.

        Returns:
            Tuple of (notifications, total_count, unread_count)
        """
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.read_at.is_(None))

        total = query.count()
        unread_count = self.db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.read_at.is_(None),
        ).count()

        notifications = query.order_by(
            Notification.created_at.desc()
        ).offset(offset).limit(limit).all()

        return notifications, total, unread_count

    def mark_as_read(self, notification_ids: List[UUID], user_id: str) -> int:
        """Mark notifications as read. Only the user's own notifications are touched.

        Returns:
            Number of notifications updated
        """
        count = self.db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.id.in_(notification_ids),
            Notification.read_at.is_(None),
        ).update(
            {"read_at": datetime.now(timezone.utc)},
            synchronize_session=False
        )
        self.db.flush()
        return count

    def mark_all_as_read(self, user_id: str) -> int:
        count = self.db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.read_at.is_(None),
        ).update(
            {"read_at": datetime.now(timezone.utc)},
            synchronize_session=False
        )
        self.db.flush()
        return count
