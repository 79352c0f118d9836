from datetime import date
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import ConflictError, NotFoundError, UpstreamError, ValidationError
from ..models.event_type import EventType
from ..models.future_event import FutureEvent
from ..models.user import User

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "event_type", "date", "notes")

def list_events(db: Session, *, user_id: str, upcoming_from: date | None = None) -> list[FutureEvent]:
    stmt = select(FutureEvent).where(FutureEvent.user_id == user_id)
    if upcoming_from is not None:
        stmt = stmt.where(FutureEvent.date >= upcoming_from)
    return list(db.execute(stmt.order_by(FutureEvent.date)).scalars())

def _get_event(db: Session, *, event_id: str, user_id: str) -> FutureEvent:
    event = db.execute(
        select(FutureEvent).where(FutureEvent.id == event_id, FutureEvent.user_id == user_id)
    ).scalar_one_or_none()
    if not event:
        raise NotFoundError("Event not found or access denied")
    return event

def _save(db: Session, event: FutureEvent | EventType, failure_message: str):
    try:
        db.commit()
    except SQLAlchemyError:
        logger.error(failure_message, exc_info=True)
        db.rollback()
        raise UpstreamError(failure_message)
    db.refresh(event)
    return event

def create_event(
    db: Session, *, user_id: str, name: str, date: date, event_type: str | None = None, notes: str | None = None
) -> FutureEvent:
    if not db.get(User, user_id):
        raise NotFoundError("User not found")
    if not name or not name.strip():
        raise ValidationError("Name is required")
    event = FutureEvent(user_id=user_id, name=name.strip(), date=date, event_type=event_type, notes=notes)
    db.add(event)
    return _save(db, event, "Failed to create event")

def update_event(db: Session, *, event_id: str, user_id: str, changes: dict) -> FutureEvent:
    event = _get_event(db, event_id=event_id, user_id=user_id)
    for field in EDITABLE_FIELDS:
        if field not in changes:
            continue
        value = changes[field]
        if field == "name":
            if not value or not value.strip():
                raise ValidationError("Name is required")
            value = value.strip()
        if field == "date" and value is None:
            raise ValidationError("Date is required")
        setattr(event, field, value)
    return _save(db, event, "Failed to update event")

def delete_event(db: Session, *, event_id: str, user_id: str) -> None:
    event = _get_event(db, event_id=event_id, user_id=user_id)
    db.delete(event)
    try:
        db.commit()
    except SQLAlchemyError:
        logger.error("Failed to delete event", exc_info=True)
        db.rollback()
        raise UpstreamError("Failed to delete event")

# Event types: the user's own list of labels, offered as suggestions for events

def list_event_types(db: Session, *, user_id: str) -> list[EventType]:
    stmt = select(EventType).where(EventType.user_id == user_id).order_by(EventType.name)
    return list(db.execute(stmt).scalars())

def event_type_suggestions(db: Session, *, user_id: str) -> list[str]:
    """Saved type names first, then any other type already used on an event."""
    names = [t.name for t in list_event_types(db, user_id=user_id)]
    used = db.execute(
        select(FutureEvent.event_type)
        .where(FutureEvent.user_id == user_id, FutureEvent.event_type.is_not(None))
        .distinct()
        .order_by(FutureEvent.event_type)
    ).scalars()
    seen = set(names)
    for name in used:
        if name and name not in seen:
            seen.add(name)
            names.append(name)
    return names

def _get_event_type(db: Session, *, type_id: str, user_id: str) -> EventType:
    event_type = db.execute(
        select(EventType).where(EventType.id == type_id, EventType.user_id == user_id)
    ).scalar_one_or_none()
    if not event_type:
        raise NotFoundError("Event type not found or access denied")
    return event_type

def _clean_type_name(db: Session, *, user_id: str, name: str | None, exclude_id: str | None = None) -> str:
    if not name or not name.strip():
        raise ValidationError("Name is required")
    name = name.strip()
    stmt = select(EventType.id).where(EventType.user_id == user_id, EventType.name == name)
    if exclude_id is not None:
        stmt = stmt.where(EventType.id != exclude_id)
    if db.execute(stmt).first():
        raise ConflictError("Event type already exists")
    return name

def create_event_type(db: Session, *, user_id: str, name: str) -> EventType:
    if not db.get(User, user_id):
        raise NotFoundError("User not found")
    event_type = EventType(user_id=user_id, name=_clean_type_name(db, user_id=user_id, name=name))
    db.add(event_type)
    _save(db, event_type, "Failed to create event type")
    logger.info(f"Event type {event_type.name!r} added for user {user_id}")
    return event_type

def rename_event_type(db: Session, *, type_id: str, user_id: str, name: str) -> EventType:
    event_type = _get_event_type(db, type_id=type_id, user_id=user_id)
    event_type.name = _clean_type_name(db, user_id=user_id, name=name, exclude_id=event_type.id)
    return _save(db, event_type, "Failed to update event type")

def delete_event_type(db: Session, *, type_id: str, user_id: str) -> None:
    # Events keep their free-text event_type; only the saved label goes away
    event_type = _get_event_type(db, type_id=type_id, user_id=user_id)
    db.delete(event_type)
    try:
        db.commit()
    except SQLAlchemyError:
        logger.error("Failed to delete event type", exc_info=True)
        db.rollback()
        raise UpstreamError("Failed to delete event type")
