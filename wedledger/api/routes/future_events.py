from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...core.errors import ValidationError
from ...schemas.common import SuccessOut
from ...schemas.ledger import (
    FutureEventCreate,
    FutureEventItemOut,
    FutureEventListOut,
    FutureEventOut,
    FutureEventUpdate,
)
from ...services import event_service
from ..deps import get_db

router = APIRouter()


@router.get("", response_model=FutureEventListOut)
def list_events(
    user_id: str = Query("", alias="userId"),
    upcoming_from: Optional[date] = Query(None, alias="from"),
    db: Session = Depends(get_db),
):
    if not user_id:
        raise ValidationError("userId is required")
    events = event_service.list_events(db, user_id=user_id, upcoming_from=upcoming_from)
    return FutureEventListOut(events=[FutureEventOut.model_validate(e) for e in events])


@router.post("", response_model=FutureEventItemOut)
def create_event(payload: FutureEventCreate, db: Session = Depends(get_db)):
    event = event_service.create_event(
        db,
        user_id=payload.user_id,
        name=payload.name,
        date=payload.date,
        event_type=payload.event_type,
        notes=payload.notes,
    )
    return FutureEventItemOut(event=FutureEventOut.model_validate(event))


@router.patch("/{event_id}", response_model=FutureEventItemOut)
def update_event(event_id: str, payload: FutureEventUpdate, db: Session = Depends(get_db)):
    changes = payload.model_dump(exclude_unset=True, exclude={"user_id"})
    event = event_service.update_event(db, event_id=event_id, user_id=payload.user_id, changes=changes)
    return FutureEventItemOut(event=FutureEventOut.model_validate(event))


@router.delete("/{event_id}", response_model=SuccessOut)
def delete_event(event_id: str, user_id: str = Query("", alias="userId"), db: Session = Depends(get_db)):
    if not user_id:
        raise ValidationError("userId is required")
    event_service.delete_event(db, event_id=event_id, user_id=user_id)
    return SuccessOut()
