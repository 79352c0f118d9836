from dataclasses import dataclass
import logging
import secrets

from sqlalchemy import select, update, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import NotFoundError, UnauthorizedError, UpstreamError
from ..models.user import User
from ..models.family_member import FamilyMember
from ..models.gift import Gift
from .identity import normalize_phone, user_id_from_phone
from .sms_service import SmsResult, SmsSender, otp_message
from .user_service import get_by_phone

logger = logging.getLogger(__name__)


@dataclass
class VerifiedUser:
    id: str
    phone: str
    family_count: int
    gifts_count: int


def generate_code() -> str:
    return str(100000 + secrets.randbelow(900000))


def issue_otp(db: Session, *, phone: str, send_sms: SmsSender) -> SmsResult:
    """Store a fresh code on the account (creating it if needed) and text it.

    The result reflects delivery only; the code is stored even when the SMS
    gateway fails.
    """
    clean_phone = normalize_phone(phone)
    code = generate_code()

    user = get_by_phone(db, clean_phone)
    if user:
        user.otp_code = code
    else:
        logger.info(f"Creating user on first OTP request for {clean_phone}")
        db.add(User(id=user_id_from_phone(clean_phone), phone=clean_phone, otp_code=code))
    try:
        db.commit()
    except SQLAlchemyError:
        logger.error(f"Error storing OTP for {clean_phone}", exc_info=True)
        db.rollback()
        raise UpstreamError("Failed to generate OTP")

    result = send_sms(clean_phone, otp_message(code))
    if not result.success:
        logger.error(f"SMS sending failed for {clean_phone}: {result.error}")
    return result


def verify_otp(db: Session, *, phone: str, code: str) -> VerifiedUser:
    clean_phone = normalize_phone(phone)
    clean_code = code.strip()

    user = get_by_phone(db, clean_phone)
    if not user:
        raise NotFoundError("User not found. Please request OTP first.")
    if not user.otp_code or user.otp_code != clean_code:
        logger.warning(f"Invalid OTP submitted for {clean_phone}")
        raise UnauthorizedError("Invalid OTP. Please check the code and try again.")

    # Only clear the code we checked; a code re-issued in between stays valid
    cleared = db.execute(
        update(User)
        .where(User.id == user.id, User.otp_code == clean_code)
        .values(otp_code=None)
    ).rowcount
    db.commit()
    if not cleared:
        raise UnauthorizedError("Invalid OTP. Please check the code and try again.")

    family_count = db.scalar(select(func.count()).select_from(FamilyMember).where(FamilyMember.user_id == user.id))
    gifts_count = db.scalar(select(func.count()).select_from(Gift).where(Gift.user_id == user.id))
    logger.info(f"OTP verified for user {user.id}")
    return VerifiedUser(
        id=user.id,
        phone=clean_phone,
        family_count=family_count or 0,
        gifts_count=gifts_count or 0,
    )
