from datetime import datetime
from enum import StrEnum
from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from uuid import uuid4

from .user import User
from ..db.base_class import Base
from . import utcnow

class Permission(StrEnum):
    READ = "read"
    READ_WRITE = "read_write"

class ConnectionStatus(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REVOKED = "revoked"

class ConnectionRole(StrEnum):
    OWNER = "owner"
    VIEWER = "viewer"

    @classmethod
    def _missing_(cls, value):
        # Column names call the owner "child" and the viewer "parent"
        aliases = {"child": cls.OWNER, "parent": cls.VIEWER}
        if isinstance(value, str):
            return aliases.get(value.lower())
        return None

class UserConnection(Base):
    """A ledger-sharing relationship.

    ``child_user_id`` is the owner whose ledger is shared, ``parent_user_id``
    the viewer who was granted access.
    """
    __tablename__ = "user_connection"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    parent_user_id: Mapped[str] = mapped_column(String(36), ForeignKey("user.id", ondelete="CASCADE"), index=True)
    child_user_id: Mapped[str] = mapped_column(String(36), ForeignKey("user.id", ondelete="CASCADE"), index=True)
    permission: Mapped[Permission] = mapped_column(default=Permission.READ)
    status: Mapped[ConnectionStatus] = mapped_column(default=ConnectionStatus.PENDING, index=True)
    invite_token: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    invite_expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    parent_user: Mapped["User"] = relationship(foreign_keys=[parent_user_id])
    child_user: Mapped["User"] = relationship(foreign_keys=[child_user_id])
