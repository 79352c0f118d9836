from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...core.errors import ValidationError
from ...schemas.common import SuccessOut
from ...schemas.ledger import GiftCreate, GiftItemOut, GiftListOut, GiftOut, GiftUpdate
from ...services import ledger_service
from ..deps import get_db

router = APIRouter()


# Viewers pass their own userId plus the ownerUserId of the shared ledger
@router.get("", response_model=GiftListOut)
def list_gifts(
    user_id: str = Query("", alias="userId"),
    owner_user_id: str | None = Query(None, alias="ownerUserId"),
    db: Session = Depends(get_db),
):
    if not user_id:
        raise ValidationError("userId is required")
    gifts = ledger_service.list_gifts(db, actor_id=user_id, owner_id=owner_user_id or user_id)
    return GiftListOut(gifts=[GiftOut.model_validate(g) for g in gifts])


@router.post("", response_model=GiftItemOut)
def create_gift(payload: GiftCreate, db: Session = Depends(get_db)):
    gift = ledger_service.create_gift(
        db,
        actor_id=payload.user_id,
        owner_id=payload.owner_user_id or payload.user_id,
        amount=payload.amount,
        currency=payload.currency,
        recipient_name=payload.recipient_name,
        from_member_id=payload.from_member_id,
        event_type=payload.event_type,
        date=payload.date,
        notes=payload.notes,
    )
    return GiftItemOut(gift=GiftOut.model_validate(gift))


@router.patch("/{gift_id}", response_model=GiftItemOut)
def update_gift(gift_id: str, payload: GiftUpdate, db: Session = Depends(get_db)):
    changes = payload.model_dump(exclude_unset=True, exclude={"user_id", "owner_user_id"})
    gift = ledger_service.update_gift(
        db,
        actor_id=payload.user_id,
        owner_id=payload.owner_user_id or payload.user_id,
        gift_id=gift_id,
        changes=changes,
    )
    return GiftItemOut(gift=GiftOut.model_validate(gift))


@router.delete("/{gift_id}", response_model=SuccessOut)
def delete_gift(
    gift_id: str,
    user_id: str = Query("", alias="userId"),
    owner_user_id: str | None = Query(None, alias="ownerUserId"),
    db: Session = Depends(get_db),
):
    if not user_id:
        raise ValidationError("userId is required")
    ledger_service.delete_gift(db, actor_id=user_id, owner_id=owner_user_id or user_id, gift_id=gift_id)
    return SuccessOut()
