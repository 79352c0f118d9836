from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from ...core.errors import UpstreamError
from ...schemas.auth import OtpSendIn, OtpSendOut, OtpVerifyIn, OtpVerifyOut, SessionOut, VerifiedUserOut
from ...services.otp_service import issue_otp, verify_otp
from ...services.session_service import start_session
from ...services.sms_service import SmsSender
from ..deps import get_db, get_sms_sender

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/send", response_model=OtpSendOut)
def send_otp(payload: OtpSendIn, db: Session = Depends(get_db), send_sms: SmsSender = Depends(get_sms_sender)):
    logger.info(f"OTP requested for {payload.phone}")
    result = issue_otp(db, phone=payload.phone, send_sms=send_sms)
    if not result.success:
        raise UpstreamError(result.error or "Failed to send SMS")
    return OtpSendOut(recipients=result.recipients)


@router.post("/verify", response_model=OtpVerifyOut)
def verify(payload: OtpVerifyIn, db: Session = Depends(get_db)):
    user = verify_otp(db, phone=payload.phone, code=payload.otp)
    session = start_session(user)
    return OtpVerifyOut(
        user=VerifiedUserOut(
            id=user.id,
            phone=user.phone,
            family_count=user.family_count,
            gifts_count=user.gifts_count,
        ),
        session=SessionOut(access_token=session.access_token, expires_at=session.expires_at),
    )
