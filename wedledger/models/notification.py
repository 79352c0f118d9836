from datetime import datetime
from enum import StrEnum
from sqlalchemy import String, DateTime, ForeignKey, Boolean, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from uuid import uuid4

from .user import User
from ..db.base_class import Base
from . import utcnow

class NotificationType(StrEnum):
    INVITE = "invite"
    PERMISSION_UPDATE = "permission_update"
    REVOKED = "revoked"
    VIEWED = "viewed"
    ACCEPTED = "accepted"
    GENERAL = "general"

class Notification(Base):
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("user.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, default="", nullable=False)
    type: Mapped[NotificationType] = mapped_column(default=NotificationType.GENERAL)
    # Usually the connection the notification is about
    related_id: Mapped[str | None] = mapped_column(String(36))
    read: Mapped[bool] = mapped_column(Boolean, default=False, index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, index=True, nullable=False)

    user: Mapped["User"] = relationship(back_populates="notifications")
