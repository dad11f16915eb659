# backend/creatoraide/models/__init__.py
from creatoraide.models.base import Base
from creatoraide.models.progress_snapshot import ProgressSnapshot
from creatoraide.models.notification import Notification, NotificationType, NotificationSeverity

__all__ = [
    "Base",
    "ProgressSnapshot",
    "Notification", "NotificationType", "NotificationSeverity",
]
