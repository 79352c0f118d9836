from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...core.errors import ValidationError
from ...schemas.common import SuccessOut
from ...schemas.notification import (
    NotificationCreate,
    NotificationItemOut,
    NotificationListOut,
    NotificationOut,
    NotificationReadUpdate,
)
from ...services import notification_service
from ..deps import get_db

router = APIRouter()


@router.get("", response_model=NotificationListOut)
def list_notifications(
    user_id: str = Query("", alias="userId"),
    unread_only: bool = Query(False, alias="unreadOnly"),
    db: Session = Depends(get_db),
):
    if not user_id:
        raise ValidationError("userId is required")
    rows = notification_service.list_notifications(db, user_id=user_id, unread_only=unread_only)
    items = [NotificationOut.model_validate(r) for r in rows]
    return NotificationListOut(notifications=items, unread_count=sum(1 for n in items if not n.read))


@router.post("", response_model=NotificationItemOut)
def create_notification(payload: NotificationCreate, db: Session = Depends(get_db)):
    notification = notification_service.create_notification(
        db,
        user_id=payload.user_id,
        title=payload.title,
        content=payload.content,
        type=payload.type,
        related_id=payload.related_id,
    )
    return NotificationItemOut(notification=NotificationOut.model_validate(notification))


@router.patch("/{notification_id}", response_model=NotificationItemOut)
def mark_read(notification_id: str, payload: NotificationReadUpdate, db: Session = Depends(get_db)):
    notification = notification_service.set_read(
        db, notification_id=notification_id, user_id=payload.user_id, read=payload.read
    )
    return NotificationItemOut(notification=NotificationOut.model_validate(notification))


@router.delete("/{notification_id}", response_model=SuccessOut)
def delete_notification(notification_id: str, user_id: str = Query("", alias="userId"), db: Session = Depends(get_db)):
    if not user_id:
        raise ValidationError("userId is required")
    notification_service.delete_notification(db, notification_id=notification_id, user_id=user_id)
    return SuccessOut()
