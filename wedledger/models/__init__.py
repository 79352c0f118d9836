from datetime import datetime, timezone
def utcnow():
    return datetime.now(timezone.utc)
def as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back naive; they were written as UTC
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value.astimezone(timezone.utc)
from .user import User
from .family_member import FamilyMember
from .gift import Gift
from .connection import UserConnection
from .notification import Notification
from .future_event import FutureEvent
from .event_type import EventType
