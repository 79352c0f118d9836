from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from ..core.errors import NotFoundError, UpstreamError, ValidationError
from ..models.notification import Notification, NotificationType
from ..models.user import User
from .notification_text import compose_notification

logger = logging.getLogger(__name__)

NOTIFICATION_LIST_LIMIT = 50

def notify(
    db: Session,
    *,
    user_id: str,
    type: NotificationType,
    language: str | None = None,
    related_id: str | None = None,
    **names,
) -> Notification | None:
    """Best-effort notification for a lifecycle transition.

    Call only after the triggering change is committed. Failures are logged
    and rolled back; they never reach the caller.
    """
    try:
        text = compose_notification(type, language, **names)
        notification = Notification(
            user_id=user_id,
            title=text.title,
            content=text.content,
            type=type,
            related_id=related_id,
            read=False,
        )
        db.add(notification)
        db.commit()
        db.refresh(notification)
        logger.info(f"Notification {notification.id} ({type}) created for user {user_id}")
        return notification
    except Exception:
        db.rollback()
        logger.error(f"Error creating {type} notification for user {user_id}", exc_info=True)
        return None

def _parse_type(value: str) -> NotificationType:
    try:
        return NotificationType(value)
    except ValueError:
        raise ValidationError("Valid type is required")

def _get_owned(db: Session, *, notification_id: str, user_id: str) -> Notification:
    notification = db.execute(
        select(Notification).where(Notification.id == notification_id, Notification.user_id == user_id)
    ).scalar_one_or_none()
    if not notification:
        raise NotFoundError("Notification not found or access denied")
    return notification

def list_notifications(db: Session, *, user_id: str, unread_only: bool = False) -> list[Notification]:
    stmt = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        stmt = stmt.where(Notification.read.is_(False))
    stmt = stmt.order_by(Notification.created_at.desc()).limit(NOTIFICATION_LIST_LIMIT)
    notifications = list(db.execute(stmt).scalars())
    logger.debug(f"Fetched {len(notifications)} notifications for user {user_id}")
    return notifications

def create_notification(
    db: Session, *, user_id: str, title: str, content: str, type: str, related_id: str | None = None
) -> Notification:
    kind = _parse_type(type)
    if not db.get(User, user_id):
        raise NotFoundError("User not found")
    notification = Notification(user_id=user_id, title=title, content=content, type=kind, related_id=related_id)
    db.add(notification)
    try:
        db.commit()
    except SQLAlchemyError:
        logger.error(f"Error creating notification for user {user_id}", exc_info=True)
        db.rollback()
        raise UpstreamError("Failed to create notification")
    db.refresh(notification)
    return notification

def set_read(db: Session, *, notification_id: str, user_id: str, read: bool) -> Notification:
    notification = _get_owned(db, notification_id=notification_id, user_id=user_id)
    notification.read = read
    db.commit()
    db.refresh(notification)
    return notification

def delete_notification(db: Session, *, notification_id: str, user_id: str) -> None:
    notification = _get_owned(db, notification_id=notification_id, user_id=user_id)
    db.delete(notification)
    db.commit()
