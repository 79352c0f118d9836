from typing import Optional

from .common import CamelModel, SuccessOut


class MemberBucketOut(CamelModel):
    name: str
    color: str
    count: int
    amount: float


class MonthBucketOut(CamelModel):
    month: str
    gifts: int


class RecipientCountOut(CamelModel):
    name: str
    count: int


class AnalyticsOut(SuccessOut):
    total_gifts: int
    total_recipients: int
    rates_available: bool
    normalized_total: Optional[float] = None
    average_amount: Optional[float] = None
    base_currency: str
    amounts_by_currency: dict[str, float]
    by_family_member: list[MemberBucketOut]
    timeline: list[MonthBucketOut]
    top_recipients: list[RecipientCountOut]
    multiple_gift_recipients: list[RecipientCountOut]
