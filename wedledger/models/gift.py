import datetime as dt
from sqlalchemy import String, DateTime, Date, ForeignKey, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from uuid import uuid4

from .user import User
from .family_member import FamilyMember
from ..db.base_class import Base
from . import utcnow

class Gift(Base):
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("user.id", ondelete="CASCADE"), index=True)
    amount: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="ILS", nullable=False)
    recipient_name: Mapped[str] = mapped_column(String(200), nullable=False)
    # The family member the gift was given on behalf of
    from_member_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("familymember.id", ondelete="SET NULL"), index=True)
    event_type: Mapped[str | None] = mapped_column(String(64))
    date: Mapped[dt.date] = mapped_column(Date, index=True, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    user: Mapped["User"] = relationship(back_populates="gifts")
    from_member: Mapped["FamilyMember | None"] = relationship(back_populates="gifts")
