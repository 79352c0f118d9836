from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel

from .common import ORMModel, SuccessOut


class PublicUserOut(ORMModel):
    id: str
    phone: str
    firstname: Optional[str] = None
    lastname: Optional[str] = None


class UserOut(PublicUserOut):
    birthdate: Optional[date] = None
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(BaseModel):
    firstname: str
    lastname: str
    birthdate: Optional[date] = None


class ProfileOut(SuccessOut):
    user: UserOut
