# backend/creatoraide/models/progress_snapshot.py
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from creatoraide.models.base import Base, TimestampMixin, UUIDMixin


class ProgressSnapshot(Base, UUIDMixin, TimestampMixin):
    """Serialized onboarding progress stored under a key-value style key."""
    __tablename__ = "progress_snapshots"

    key: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    payload: Mapped[str] = mapped_column(Text)
