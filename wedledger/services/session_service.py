"""
Login sessions.

A session is returned by a successful OTP verification and can be kept in any
key-value store the caller supplies (browser storage, a cache, a dict).
Nothing here keeps process-wide state.
"""
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Protocol
import json
import logging

from .otp_service import VerifiedUser
from .security import create_access_token

logger = logging.getLogger(__name__)

SESSION_KEY = "wedledger_user"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


@dataclass
class AuthSession:
    user_id: str
    phone: str
    family_count: int
    gifts_count: int
    access_token: str
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(timezone.utc)) >= self.expires_at

    def to_json(self) -> str:
        data = asdict(self)
        data["expires_at"] = self.expires_at.isoformat()
        return json.dumps(data)

    @classmethod
    def from_json(cls, raw: str) -> "AuthSession":
        data = json.loads(raw)
        data["expires_at"] = datetime.fromisoformat(data["expires_at"])
        return cls(**data)


def start_session(user: VerifiedUser, store: KeyValueStore | None = None) -> AuthSession:
    token, expires_at = create_access_token(user.id)
    session = AuthSession(
        user_id=user.id,
        phone=user.phone,
        family_count=user.family_count,
        gifts_count=user.gifts_count,
        access_token=token,
        expires_at=expires_at,
    )
    if store is not None:
        save_session(session, store)
    return session


def save_session(session: AuthSession, store: KeyValueStore) -> None:
    store.set(SESSION_KEY, session.to_json())


def load_session(store: KeyValueStore) -> AuthSession | None:
    raw = store.get(SESSION_KEY)
    if raw is None:
        return None
    try:
        session = AuthSession.from_json(raw)
    except (ValueError, KeyError, TypeError):
        logger.warning("Discarding unreadable stored session")
        store.delete(SESSION_KEY)
        return None
    if session.is_expired():
        store.delete(SESSION_KEY)
        return None
    return session


def clear_session(store: KeyValueStore) -> None:
    store.delete(SESSION_KEY)
