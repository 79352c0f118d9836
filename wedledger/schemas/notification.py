from datetime import datetime
from typing import Optional

from pydantic import Field

from ..models.notification import NotificationType
from .common import CamelModel, ORMModel, SuccessOut


class NotificationOut(ORMModel):
    id: str
    user_id: str
    title: str
    content: str
    type: NotificationType
    related_id: Optional[str] = None
    read: bool
    created_at: datetime


class NotificationListOut(SuccessOut):
    notifications: list[NotificationOut]
    unread_count: int


class NotificationCreate(CamelModel):
    user_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    type: str = Field(min_length=1)
    related_id: Optional[str] = None


class NotificationReadUpdate(CamelModel):
    user_id: str = Field(min_length=1)
    read: bool


class NotificationItemOut(SuccessOut):
    notification: NotificationOut
