from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.errors import ValidationError
from ...schemas.connection import (
    ConnectionDetailOut,
    ConnectionOut,
    InviteAcceptIn,
    InviteAcceptOut,
    InviteDetailsOut,
    InviteGenerateIn,
    InviteGenerateOut,
)
from ...schemas.user import PublicUserOut
from ...services import connection_service
from ...services.sms_service import SmsSender
from ..deps import get_db, get_invite_sms_sender

router = APIRouter()


@router.post("/generate", response_model=InviteGenerateOut)
def generate(
    payload: InviteGenerateIn,
    db: Session = Depends(get_db),
    send_sms: Optional[SmsSender] = Depends(get_invite_sms_sender),
):
    invite = connection_service.generate_invite(
        db,
        owner_id=payload.child_user_id,
        viewer_phone=payload.parent_phone,
        permission=payload.permission,
        language=payload.language,
        send_sms=send_sms,
    )
    return InviteGenerateOut(
        invite_token=invite.connection.invite_token,
        invite_url=invite.invite_url,
        expires_at=invite.expires_at,
        parent_user=PublicUserOut.model_validate(invite.viewer),
    )


@router.get("/accept", response_model=InviteDetailsOut)
def invite_details(token: Optional[str] = None, db: Session = Depends(get_db)):
    if not token:
        raise ValidationError("Invite token is required")
    details = connection_service.get_invite_details(db, token=token)
    connection = ConnectionOut.model_validate(details.connection)
    return InviteDetailsOut(
        connection=ConnectionDetailOut(
            **connection.model_dump(),
            is_expired=details.is_expired,
            parent_user=PublicUserOut.model_validate(details.viewer) if details.viewer else None,
            child_user=PublicUserOut.model_validate(details.owner) if details.owner else None,
        )
    )


@router.post("/accept", response_model=InviteAcceptOut)
def accept(payload: InviteAcceptIn, db: Session = Depends(get_db)):
    accepted = connection_service.accept_invite(db, token=payload.token, viewer_id=payload.parent_user_id)
    return InviteAcceptOut(
        connection=ConnectionOut.model_validate(accepted.connection),
        child_user=PublicUserOut.model_validate(accepted.owner) if accepted.owner else None,
    )
