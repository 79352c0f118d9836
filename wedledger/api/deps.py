from typing import Generator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.errors import UnauthorizedError
from ..db.session import SessionLocal
from ..models.user import User
from ..services.exchange_rates import RateFetcher, fetch_rates
from ..services.security import decode_access_token
from ..services.sms_service import SmsSender, send_sms

bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_sms_sender() -> SmsSender:
    return send_sms


def get_invite_sms_sender(sender: SmsSender = Depends(get_sms_sender)) -> Optional[SmsSender]:
    # Invite links are texted only when explicitly switched on
    return sender if settings.SEND_INVITE_SMS else None


def get_rate_fetcher() -> RateFetcher:
    return fetch_rates


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise UnauthorizedError("Not authenticated")
    payload = decode_access_token(credentials.credentials)
    user_id: Optional[str] = payload.get("sub")
    if not user_id:
        raise UnauthorizedError("Invalid token payload")
    user = db.get(User, user_id)
    if not user:
        raise UnauthorizedError("Inactive or missing user")
    return user
