import re

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from wedledger.api.deps import get_db, get_rate_fetcher, get_sms_sender
from wedledger.db.base import Base, User
from wedledger.main import app
from wedledger.services.identity import user_id_from_phone
from wedledger.services.sms_service import SmsResult


class FakeSms:
    """Records every message instead of calling the gateway."""

    def __init__(self, success: bool = True):
        self.success = success
        self.sent: list[tuple[str, str]] = []

    def __call__(self, recipient: str, message: str) -> SmsResult:
        self.sent.append((recipient, message))
        if not self.success:
            return SmsResult(success=False, error="gateway down")
        return SmsResult(success=True, recipients=1)

    def last_code(self, recipient: str) -> str:
        for to, message in reversed(self.sent):
            if to == recipient:
                return re.search(r"\b(\d{6})\b", message).group(1)
        raise AssertionError(f"no SMS sent to {recipient}")


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def sms():
    return FakeSms()


@pytest.fixture()
def rates():
    return {"ILS": 1.0, "USD": 3.7, "EUR": 4.0}


@pytest.fixture()
def client(session_factory, sms, rates):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_sms_sender] = lambda: sms
    app.dependency_overrides[get_rate_fetcher] = lambda: (lambda base: dict(rates))
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    def _make(phone: str, firstname: str | None = None, lastname: str | None = None) -> User:
        user = User(id=user_id_from_phone(phone), phone=phone, firstname=firstname, lastname=lastname)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make
