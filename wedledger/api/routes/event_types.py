from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...core.errors import ValidationError
from ...schemas.common import SuccessOut
from ...schemas.ledger import (
    EventTypeIn,
    EventTypeItemOut,
    EventTypeListOut,
    EventTypeOut,
    EventTypeSuggestionsOut,
)
from ...services import event_service
from ..deps import get_db

router = APIRouter()


@router.get("", response_model=EventTypeListOut)
def list_event_types(user_id: str = Query("", alias="userId"), db: Session = Depends(get_db)):
    if not user_id:
        raise ValidationError("userId is required")
    types = event_service.list_event_types(db, user_id=user_id)
    return EventTypeListOut(event_types=[EventTypeOut.model_validate(t) for t in types])


@router.get("/suggestions", response_model=EventTypeSuggestionsOut)
def suggestions(user_id: str = Query("", alias="userId"), db: Session = Depends(get_db)):
    if not user_id:
        raise ValidationError("userId is required")
    return EventTypeSuggestionsOut(names=event_service.event_type_suggestions(db, user_id=user_id))


@router.post("", response_model=EventTypeItemOut)
def create_event_type(payload: EventTypeIn, db: Session = Depends(get_db)):
    event_type = event_service.create_event_type(db, user_id=payload.user_id, name=payload.name)
    return EventTypeItemOut(event_type=EventTypeOut.model_validate(event_type))


@router.patch("/{type_id}", response_model=EventTypeItemOut)
def rename_event_type(type_id: str, payload: EventTypeIn, db: Session = Depends(get_db)):
    event_type = event_service.rename_event_type(db, type_id=type_id, user_id=payload.user_id, name=payload.name)
    return EventTypeItemOut(event_type=EventTypeOut.model_validate(event_type))


@router.delete("/{type_id}", response_model=SuccessOut)
def delete_event_type(type_id: str, user_id: str = Query("", alias="userId"), db: Session = Depends(get_db)):
    if not user_id:
        raise ValidationError("userId is required")
    event_service.delete_event_type(db, type_id=type_id, user_id=user_id)
    return SuccessOut()
