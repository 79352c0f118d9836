from datetime import date, datetime
from typing import TYPE_CHECKING, Optional
from sqlalchemy import String, DateTime, Date
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..db.base_class import Base
from . import utcnow

if TYPE_CHECKING:
    from .family_member import FamilyMember
    from .gift import Gift
    from .notification import Notification
    from .future_event import FutureEvent
    from .event_type import EventType

class User(Base):
    __tablename__ = "user"

    # Derived from the normalized phone (see services.identity), never generated randomly
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    phone: Mapped[str] = mapped_column(String(32), unique=True, index=True, nullable=False)
    firstname: Mapped[Optional[str]] = mapped_column(String(128))
    lastname: Mapped[Optional[str]] = mapped_column(String(128))
    birthdate: Mapped[Optional[date]] = mapped_column(Date)

    # Single-use login code, cleared on successful verification
    otp_code: Mapped[Optional[str]] = mapped_column(String(6))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    family_members: Mapped[list["FamilyMember"]] = relationship(back_populates="user", cascade="all,delete-orphan")
    gifts: Mapped[list["Gift"]] = relationship(back_populates="user", cascade="all,delete-orphan")
    notifications: Mapped[list["Notification"]] = relationship(back_populates="user", cascade="all,delete-orphan")
    future_events: Mapped[list["FutureEvent"]] = relationship(back_populates="user", cascade="all,delete-orphan")
    event_types: Mapped[list["EventType"]] = relationship(back_populates="user", cascade="all,delete-orphan")

    @property
    def display_name(self) -> str | None:
        if self.firstname and self.lastname:
            return f"{self.firstname} {self.lastname}"
        return self.firstname or self.phone or None
