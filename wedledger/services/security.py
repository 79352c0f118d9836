from datetime import datetime, timedelta, timezone
import jwt
from ..core.config import settings
from ..core.errors import UnauthorizedError

ALGORITHM = "HS256"


def create_access_token(sub: str, minutes: int | None = None) -> tuple[str, datetime]:
    exp_min = minutes if minutes is not None else settings.ACCESS_TOKEN_MIN
    expire = datetime.now(timezone.utc) + timedelta(minutes=exp_min)
    payload = {"sub": sub, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM), expire


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.PyJWTError:
        raise UnauthorizedError("Invalid token")
