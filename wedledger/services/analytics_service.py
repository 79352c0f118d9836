"""
Gift analytics.

Everything except ``load_summary`` is a pure function over gift rows,
family-member rows and a rate table mapping currency code to "base units per
one unit of that currency". An empty rate table means the rates could not be
fetched; converted figures are then reported as unavailable, not as zero.
"""
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.config import settings
from ..models.family_member import DEFAULT_MEMBER_COLOR, FamilyMember
from ..models.gift import Gift
from .exchange_rates import RateFetcher, RateTable
from .ledger_service import resolve_access

logger = logging.getLogger(__name__)

UNKNOWN_MEMBER = "Unknown"
FALLBACK_CURRENCY = "USD"
TOP_RECIPIENTS = 5
MONTH_FORMAT = "%b %Y"


@dataclass
class MemberBucket:
    name: str
    color: str
    count: int = 0
    amount: float = 0.0


@dataclass
class AnalyticsSummary:
    total_gifts: int
    total_recipients: int
    rates_available: bool
    normalized_total: float | None
    average_amount: float | None
    base_currency: str
    amounts_by_currency: dict[str, float] = field(default_factory=dict)
    by_family_member: list[MemberBucket] = field(default_factory=list)
    by_month: list[tuple[str, int]] = field(default_factory=list)
    top_recipients: list[tuple[str, int]] = field(default_factory=list)
    multiple_gift_recipients: list[tuple[str, int]] = field(default_factory=list)


def _currency(gift: Gift) -> str:
    return gift.currency or FALLBACK_CURRENCY


def by_family_member(gifts: Iterable[Gift], members: Iterable[FamilyMember]) -> list[MemberBucket]:
    """Count and raw-amount sum per member name, in first-seen order.

    Amounts are summed as entered, whatever their currency.
    """
    lookup = {m.id: m for m in members}
    buckets: dict[str, MemberBucket] = {}
    for gift in gifts:
        member = lookup.get(gift.from_member_id)
        name = member.name if member and member.name else UNKNOWN_MEMBER
        if name not in buckets:
            color = member.color if member and member.color else DEFAULT_MEMBER_COLOR
            buckets[name] = MemberBucket(name=name, color=color)
        buckets[name].count += 1
        buckets[name].amount += gift.amount
    return list(buckets.values())


def by_month(gifts: Iterable[Gift]) -> list[tuple[str, int]]:
    # Keys appear in the order gifts were supplied; callers sort if they need to
    counts: dict[str, int] = {}
    for gift in gifts:
        key = gift.date.strftime(MONTH_FORMAT)
        counts[key] = counts.get(key, 0) + 1
    return list(counts.items())


def recipient_counts(gifts: Iterable[Gift]) -> Counter:
    return Counter(gift.recipient_name for gift in gifts)


def top_recipients(counts: Counter, limit: int = TOP_RECIPIENTS) -> list[tuple[str, int]]:
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)[:limit]


def multiple_gift_recipients(counts: Counter) -> list[tuple[str, int]]:
    return sorted(((name, n) for name, n in counts.items() if n > 1), key=lambda item: item[1], reverse=True)


def amounts_by_currency(gifts: Iterable[Gift]) -> dict[str, float]:
    totals: dict[str, float] = {}
    for gift in gifts:
        currency = _currency(gift)
        totals[currency] = totals.get(currency, 0.0) + gift.amount
    return totals


def convert_amount(amount: float, currency: str, rates: RateTable) -> float:
    if not rates:
        return 0.0
    rate = rates.get(currency) or rates.get(FALLBACK_CURRENCY) or 1
    return amount * rate


def summarize(
    gifts: list[Gift], members: list[FamilyMember], rates: RateTable, base_currency: str | None = None
) -> AnalyticsSummary:
    counts = recipient_counts(gifts)
    rates_available = bool(rates)
    normalized_total = None
    average = None
    if rates_available:
        normalized_total = sum(convert_amount(g.amount, _currency(g), rates) for g in gifts)
        average = normalized_total / len(gifts) if gifts else 0.0

    return AnalyticsSummary(
        total_gifts=len(gifts),
        total_recipients=len(counts),
        rates_available=rates_available,
        normalized_total=normalized_total,
        average_amount=average,
        base_currency=base_currency or settings.BASE_CURRENCY,
        amounts_by_currency=amounts_by_currency(gifts),
        by_family_member=by_family_member(gifts, members),
        by_month=by_month(gifts),
        top_recipients=top_recipients(counts),
        multiple_gift_recipients=multiple_gift_recipients(counts),
    )


def load_summary(db: Session, *, actor_id: str, owner_id: str, fetch_rates: RateFetcher) -> AnalyticsSummary:
    resolve_access(db, actor_id=actor_id, owner_id=owner_id)
    gifts = list(db.execute(select(Gift).where(Gift.user_id == owner_id).order_by(Gift.date)).scalars())
    members = list(db.execute(select(FamilyMember).where(FamilyMember.user_id == owner_id)).scalars())

    base = settings.BASE_CURRENCY
    rates = fetch_rates(base)
    if not rates:
        logger.warning(f"No exchange rates available; converted totals for {owner_id} are unavailable")
    return summarize(gifts, members, rates, base)
