from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...core.errors import ValidationError
from ...schemas.common import SuccessOut
from ...schemas.ledger import (
    FamilyMemberCreate,
    FamilyMemberItemOut,
    FamilyMemberListOut,
    FamilyMemberOut,
    FamilyMemberUpdate,
)
from ...services import ledger_service
from ..deps import get_db

router = APIRouter()


@router.get("", response_model=FamilyMemberListOut)
def list_members(
    user_id: str = Query("", alias="userId"),
    owner_user_id: str | None = Query(None, alias="ownerUserId"),
    db: Session = Depends(get_db),
):
    if not user_id:
        raise ValidationError("userId is required")
    members = ledger_service.list_family_members(db, actor_id=user_id, owner_id=owner_user_id or user_id)
    return FamilyMemberListOut(family_members=[FamilyMemberOut.model_validate(m) for m in members])


@router.post("", response_model=FamilyMemberItemOut)
def create_member(payload: FamilyMemberCreate, db: Session = Depends(get_db)):
    member = ledger_service.create_family_member(db, owner_id=payload.user_id, name=payload.name, color=payload.color)
    return FamilyMemberItemOut(family_member=FamilyMemberOut.model_validate(member))


@router.patch("/{member_id}", response_model=FamilyMemberItemOut)
def update_member(member_id: str, payload: FamilyMemberUpdate, db: Session = Depends(get_db)):
    member = ledger_service.update_family_member(
        db, member_id=member_id, owner_id=payload.user_id, name=payload.name, color=payload.color
    )
    return FamilyMemberItemOut(family_member=FamilyMemberOut.model_validate(member))


@router.delete("/{member_id}", response_model=SuccessOut)
def delete_member(member_id: str, user_id: str = Query("", alias="userId"), db: Session = Depends(get_db)):
    if not user_id:
        raise ValidationError("userId is required")
    ledger_service.delete_family_member(db, member_id=member_id, owner_id=user_id)
    return SuccessOut()
