from datetime import datetime

from pydantic import Field

from .common import CamelModel, SuccessOut


class OtpSendIn(CamelModel):
    phone: str = Field(min_length=1)


class OtpSendOut(SuccessOut):
    recipients: int


class OtpVerifyIn(CamelModel):
    phone: str = Field(min_length=1)
    otp: str = Field(min_length=1)


class VerifiedUserOut(CamelModel):
    id: str
    phone: str
    family_count: int
    gifts_count: int


class SessionOut(CamelModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class OtpVerifyOut(SuccessOut):
    user: VerifiedUserOut
    session: SessionOut
