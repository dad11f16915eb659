# backend/creatoraide/models/notification.py
"""User-scoped notification model for onboarding events."""
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, String, Text, Index
from sqlalchemy.orm import Mapped, mapped_column

from creatoraide.models.base import Base, TimestampMixin, UUIDMixin


class NotificationType(str, Enum):
    """Types of notifications."""
    # Onboarding tour
    STEP_COMPLETED = "step_completed"
    BADGE_EARNED = "badge_earned"
    ONBOARDING_COMPLETE = "onboarding_complete"
    ONBOARDING_SKIPPED = "onboarding_skipped"

    # Persistence
    PROGRESS_NOT_SAVED = "progress_not_saved"

    # General
    INFO = "info"


class NotificationSeverity(str, Enum):
    """Severity levels for notifications."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


class Notification(Base, UUIDMixin, TimestampMixin):
    """Notification addressed to a single user.

    The user id is the identity provider's opaque identifier, so there is no
    foreign key to a local users table.
    """
    __tablename__ = "notifications"

    notification_type: Mapped[NotificationType] = mapped_column(default=NotificationType.INFO)
    title: Mapped[str] = mapped_column(String(255))
    message: Mapped[str] = mapped_column(Text)
    severity: Mapped[NotificationSeverity] = mapped_column(default=NotificationSeverity.INFO)

    user_id: Mapped[str] = mapped_column(String(255))

    read_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index('ix_notifications_user_id', 'user_id'),
        Index('ix_notifications_created_at', 'created_at'),
    )
