import datetime as dt
from typing import Optional

from pydantic import Field

from .common import CamelModel, ORMModel, SuccessOut


class FamilyMemberOut(ORMModel):
    id: str
    user_id: str
    name: str
    color: Optional[str] = None
    created_at: dt.datetime


class FamilyMemberCreate(CamelModel):
    user_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    color: Optional[str] = None


class FamilyMemberUpdate(CamelModel):
    user_id: str = Field(min_length=1)
    name: Optional[str] = None
    color: Optional[str] = None


class FamilyMemberItemOut(SuccessOut):
    family_member: FamilyMemberOut


class FamilyMemberListOut(SuccessOut):
    family_members: list[FamilyMemberOut]


class GiftOut(ORMModel):
    id: str
    user_id: str
    amount: float
    currency: str
    recipient_name: str
    from_member_id: Optional[str] = None
    event_type: Optional[str] = None
    date: dt.date
    notes: Optional[str] = None
    created_at: dt.datetime


class GiftCreate(CamelModel):
    user_id: str = Field(min_length=1)
    owner_user_id: Optional[str] = None
    amount: float = Field(ge=0)
    currency: str = Field(default="ILS", min_length=3, max_length=3)
    recipient_name: str = Field(min_length=1)
    from_member_id: Optional[str] = None
    event_type: Optional[str] = None
    date: dt.date
    notes: Optional[str] = None


class GiftUpdate(CamelModel):
    user_id: str = Field(min_length=1)
    owner_user_id: Optional[str] = None
    amount: Optional[float] = Field(default=None, ge=0)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    recipient_name: Optional[str] = None
    from_member_id: Optional[str] = None
    event_type: Optional[str] = None
    date: Optional[dt.date] = None
    notes: Optional[str] = None


class GiftItemOut(SuccessOut):
    gift: GiftOut


class GiftListOut(SuccessOut):
    gifts: list[GiftOut]


class FutureEventOut(ORMModel):
    id: str
    user_id: str
    name: str
    event_type: Optional[str] = None
    date: dt.date
    notes: Optional[str] = None
    created_at: dt.datetime


class FutureEventCreate(CamelModel):
    user_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    event_type: Optional[str] = None
    date: dt.date
    notes: Optional[str] = None


class FutureEventUpdate(CamelModel):
    user_id: str = Field(min_length=1)
    name: Optional[str] = None
    event_type: Optional[str] = None
    date: Optional[dt.date] = None
    notes: Optional[str] = None


class FutureEventItemOut(SuccessOut):
    event: FutureEventOut


class FutureEventListOut(SuccessOut):
    events: list[FutureEventOut]


class EventTypeOut(ORMModel):
    id: str
    user_id: str
    name: str
    created_at: dt.datetime


class EventTypeIn(CamelModel):
    user_id: str = Field(min_length=1)
    name: str = Field(min_length=1)


class EventTypeItemOut(SuccessOut):
    event_type: EventTypeOut


class EventTypeListOut(SuccessOut):
    event_types: list[EventTypeOut]


class EventTypeSuggestionsOut(SuccessOut):
    names: list[str]
