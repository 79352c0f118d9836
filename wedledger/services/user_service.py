from datetime import date
from sqlalchemy.orm import Session
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
import logging
from ..core.errors import UpstreamError, ValidationError
from ..models.user import User
from .identity import normalize_phone

logger = logging.getLogger(__name__)

def get_by_phone(db: Session, phone: str) -> User | None:
    return db.execute(select(User).where(User.phone == normalize_phone(phone))).scalar_one_or_none()

def update_profile(db: Session, *, user: User, firstname: str, lastname: str, birthdate: date | None) -> User:
    firstname, lastname = firstname.strip(), lastname.strip()
    if not firstname:
        raise ValidationError("First name is required")
    if not lastname:
        raise ValidationError("Last name is required")
    user.firstname = firstname
    user.lastname = lastname
    user.birthdate = birthdate
    try:
        db.commit()
    except SQLAlchemyError:
        logger.error(f"Error updating profile for user {user.id}", exc_info=True)
        db.rollback()
        raise UpstreamError("Failed to update profile")
    db.refresh(user)
    logger.info(f"Profile updated for user {user.id}")
    return user
