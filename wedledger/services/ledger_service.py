"""
Gift ledger and family members, read and written on behalf of an actor.

The actor is either the ledger owner or a viewer holding an accepted
connection. ``resolve_access`` decides which; a viewer without a connection
gets the same NotFound as a missing ledger.
"""
from datetime import date
from enum import StrEnum
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import NotFoundError, UpstreamError, ValidationError
from ..models.connection import ConnectionStatus, Permission, UserConnection
from ..models.family_member import DEFAULT_MEMBER_COLOR, FamilyMember
from ..models.gift import Gift
from ..models.user import User

logger = logging.getLogger(__name__)


class LedgerAccess(StrEnum):
    OWNER = "owner"
    READ = "read"
    READ_WRITE = "read_write"

    @property
    def can_write(self) -> bool:
        return self in (LedgerAccess.OWNER, LedgerAccess.READ_WRITE)


def resolve_access(db: Session, *, actor_id: str, owner_id: str) -> LedgerAccess:
    if actor_id == owner_id:
        if not db.get(User, owner_id):
            raise NotFoundError("User not found")
        return LedgerAccess.OWNER
    connection = db.execute(
        select(UserConnection).where(
            UserConnection.child_user_id == owner_id,
            UserConnection.parent_user_id == actor_id,
            UserConnection.status == ConnectionStatus.ACCEPTED,
        )
    ).scalars().first()
    if not connection:
        raise NotFoundError("Ledger not found or access denied")
    return LedgerAccess.READ_WRITE if connection.permission is Permission.READ_WRITE else LedgerAccess.READ


def _require_write(db: Session, *, actor_id: str, owner_id: str) -> LedgerAccess:
    access = resolve_access(db, actor_id=actor_id, owner_id=owner_id)
    if not access.can_write:
        logger.warning(f"Write to ledger {owner_id} denied for read-only viewer {actor_id}")
        raise NotFoundError("Ledger not found or access denied")
    return access


def _commit(db: Session, failure_message: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        logger.error(failure_message, exc_info=True)
        db.rollback()
        raise UpstreamError(failure_message)


# ---------------------------------------------------------------------------
# Family members
# ---------------------------------------------------------------------------

def list_family_members(db: Session, *, actor_id: str, owner_id: str) -> list[FamilyMember]:
    resolve_access(db, actor_id=actor_id, owner_id=owner_id)
    stmt = select(FamilyMember).where(FamilyMember.user_id == owner_id).order_by(FamilyMember.created_at)
    return list(db.execute(stmt).scalars())


def _get_own_member(db: Session, *, member_id: str, owner_id: str) -> FamilyMember:
    member = db.execute(
        select(FamilyMember).where(FamilyMember.id == member_id, FamilyMember.user_id == owner_id)
    ).scalar_one_or_none()
    if not member:
        raise NotFoundError("Family member not found or access denied")
    return member


def create_family_member(db: Session, *, owner_id: str, name: str, color: str | None = None) -> FamilyMember:
    if not db.get(User, owner_id):
        raise NotFoundError("User not found")
    name = name.strip()
    if not name:
        raise ValidationError("Name is required")
    member = FamilyMember(user_id=owner_id, name=name, color=color or DEFAULT_MEMBER_COLOR)
    db.add(member)
    _commit(db, "Failed to create family member")
    db.refresh(member)
    return member


def update_family_member(
    db: Session, *, member_id: str, owner_id: str, name: str | None = None, color: str | None = None
) -> FamilyMember:
    member = _get_own_member(db, member_id=member_id, owner_id=owner_id)
    if name is not None:
        if not name.strip():
            raise ValidationError("Name is required")
        member.name = name.strip()
    if color is not None:
        member.color = color
    _commit(db, "Failed to update family member")
    db.refresh(member)
    return member


def delete_family_member(db: Session, *, member_id: str, owner_id: str) -> None:
    member = _get_own_member(db, member_id=member_id, owner_id=owner_id)
    # Gifts keep their amount; they just lose the "from" tag
    for gift in member.gifts:
        gift.from_member_id = None
    db.delete(member)
    _commit(db, "Failed to delete family member")
    logger.info(f"Family member {member_id} deleted by {owner_id}")


# ---------------------------------------------------------------------------
# Gifts
# ---------------------------------------------------------------------------

def _check_member(db: Session, *, member_id: str | None, owner_id: str) -> None:
    if member_id is not None:
        _get_own_member(db, member_id=member_id, owner_id=owner_id)


def _check_amount(amount: float) -> None:
    if amount is None or amount < 0:
        raise ValidationError("Amount must be zero or positive")


def list_gifts(db: Session, *, actor_id: str, owner_id: str) -> list[Gift]:
    resolve_access(db, actor_id=actor_id, owner_id=owner_id)
    stmt = select(Gift).where(Gift.user_id == owner_id).order_by(Gift.date.desc(), Gift.created_at.desc())
    return list(db.execute(stmt).scalars())


def _get_gift(db: Session, *, gift_id: str, owner_id: str) -> Gift:
    gift = db.execute(select(Gift).where(Gift.id == gift_id, Gift.user_id == owner_id)).scalar_one_or_none()
    if not gift:
        raise NotFoundError("Gift not found or access denied")
    return gift


def create_gift(
    db: Session,
    *,
    actor_id: str,
    owner_id: str,
    amount: float,
    recipient_name: str,
    date: date,
    currency: str = "ILS",
    from_member_id: str | None = None,
    event_type: str | None = None,
    notes: str | None = None,
) -> Gift:
    _require_write(db, actor_id=actor_id, owner_id=owner_id)
    _check_amount(amount)
    if not recipient_name or not recipient_name.strip():
        raise ValidationError("Recipient name is required")
    _check_member(db, member_id=from_member_id, owner_id=owner_id)

    gift = Gift(
        user_id=owner_id,
        amount=amount,
        currency=currency.upper(),
        recipient_name=recipient_name.strip(),
        from_member_id=from_member_id,
        event_type=event_type,
        date=date,
        notes=notes,
    )
    db.add(gift)
    _commit(db, "Failed to create gift")
    db.refresh(gift)
    logger.info(f"Gift {gift.id} added to ledger {owner_id} by {actor_id}")
    return gift


def update_gift(db: Session, *, actor_id: str, owner_id: str, gift_id: str, changes: dict) -> Gift:
    _require_write(db, actor_id=actor_id, owner_id=owner_id)
    gift = _get_gift(db, gift_id=gift_id, owner_id=owner_id)

    if "amount" in changes:
        _check_amount(changes["amount"])
    if "recipient_name" in changes:
        if not changes["recipient_name"] or not changes["recipient_name"].strip():
            raise ValidationError("Recipient name is required")
        changes["recipient_name"] = changes["recipient_name"].strip()
    if "from_member_id" in changes:
        _check_member(db, member_id=changes["from_member_id"], owner_id=owner_id)
    if "currency" in changes:
        if not changes["currency"]:
            raise ValidationError("Currency is required")
        changes["currency"] = changes["currency"].upper()
    if "date" in changes and changes["date"] is None:
        raise ValidationError("Date is required")

    for field, value in changes.items():
        setattr(gift, field, value)
    _commit(db, "Failed to update gift")
    db.refresh(gift)
    return gift


def delete_gift(db: Session, *, actor_id: str, owner_id: str, gift_id: str) -> None:
    _require_write(db, actor_id=actor_id, owner_id=owner_id)
    gift = _get_gift(db, gift_id=gift_id, owner_id=owner_id)
    db.delete(gift)
    _commit(db, "Failed to delete gift")
    logger.info(f"Gift {gift_id} removed from ledger {owner_id} by {actor_id}")
