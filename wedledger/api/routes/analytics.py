from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...core.errors import ValidationError
from ...schemas.analytics import AnalyticsOut, MemberBucketOut, MonthBucketOut, RecipientCountOut
from ...services.analytics_service import load_summary
from ...services.exchange_rates import RateFetcher
from ..deps import get_db, get_rate_fetcher

router = APIRouter()


@router.get("", response_model=AnalyticsOut)
def analytics(
    user_id: str = Query("", alias="userId"),
    owner_user_id: Optional[str] = Query(None, alias="ownerUserId"),
    db: Session = Depends(get_db),
    fetch_rates: RateFetcher = Depends(get_rate_fetcher),
):
    if not user_id:
        raise ValidationError("userId is required")
    summary = load_summary(db, actor_id=user_id, owner_id=owner_user_id or user_id, fetch_rates=fetch_rates)
    return AnalyticsOut(
        total_gifts=summary.total_gifts,
        total_recipients=summary.total_recipients,
        rates_available=summary.rates_available,
        normalized_total=summary.normalized_total,
        average_amount=summary.average_amount,
        base_currency=summary.base_currency,
        amounts_by_currency=summary.amounts_by_currency,
        by_family_member=[MemberBucketOut.model_validate(b) for b in summary.by_family_member],
        timeline=[MonthBucketOut(month=m, gifts=n) for m, n in summary.by_month],
        top_recipients=[RecipientCountOut(name=name, count=n) for name, n in summary.top_recipients],
        multiple_gift_recipients=[RecipientCountOut(name=name, count=n) for name, n in summary.multiple_gift_recipients],
    )
