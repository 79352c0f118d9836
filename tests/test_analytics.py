from datetime import date
from types import SimpleNamespace

import pytest

from wedledger.services import analytics_service
from wedledger.services.analytics_service import (
    by_family_member,
    by_month,
    convert_amount,
    multiple_gift_recipients,
    recipient_counts,
    summarize,
    top_recipients,
)


def gift(amount, recipient, member=None, currency="ILS", on=date(2024, 1, 15)):
    return SimpleNamespace(amount=amount, recipient_name=recipient, from_member_id=member, currency=currency, date=on)


def member(id, name, color="#2196f3"):
    return SimpleNamespace(id=id, name=name, color=color)


def test_grouping_by_family_member():
    gifts = [gift(100, "X", "m1"), gift(50, "Y", "m1"), gift(200, "Z", "m2")]
    buckets = by_family_member(gifts, [member("m1", "Alice"), member("m2", "Bob")])
    assert [(b.name, b.count, b.amount) for b in buckets] == [("Alice", 2, 150), ("Bob", 1, 200)]


def test_unresolved_member_is_unknown():
    [bucket] = by_family_member([gift(10, "X", "gone"), gift(5, "Y")], [])
    assert bucket.name == "Unknown"
    assert bucket.color == "#e91e63"
    assert bucket.count == 2


def test_by_month_keeps_insertion_order():
    gifts = [gift(1, "a", on=date(2024, 3, 2)), gift(1, "b", on=date(2024, 1, 9)), gift(1, "c", on=date(2024, 3, 30))]
    assert by_month(gifts) == [("Mar 2024", 2), ("Jan 2024", 1)]


def test_recipients_are_case_sensitive():
    counts = recipient_counts([gift(1, "Noa"), gift(1, "noa"), gift(1, "Noa"), gift(1, "Tal")])
    assert counts["Noa"] == 2
    assert multiple_gift_recipients(counts) == [("Noa", 2)]


def test_top_recipients_limited_to_five():
    gifts = [gift(1, name) for name in "ABCDEFG"] + [gift(1, "G")]
    top = top_recipients(recipient_counts(gifts))
    assert len(top) == 5
    assert top[0] == ("G", 2)


def test_convert_amount_fallbacks():
    rates = {"ILS": 1.0, "USD": 3.5}
    assert convert_amount(10, "ILS", rates) == 10
    assert convert_amount(10, "GBP", rates) == 35
    assert convert_amount(10, "GBP", {"ILS": 1.0}) == 10
    assert convert_amount(10, "USD", {}) == 0


def test_empty_rate_table_makes_average_unavailable():
    summary = summarize([gift(100, "X"), gift(300, "Y")], [], {})
    assert summary.rates_available is False
    assert summary.average_amount is None
    assert summary.normalized_total is None
    assert summary.amounts_by_currency == {"ILS": 400}


def test_summary_with_rates():
    gifts = [gift(100, "X", currency="USD"), gift(100, "X"), gift(50, "Y", currency="EUR")]
    summary = summarize(gifts, [], {"ILS": 1.0, "USD": 4.0, "EUR": 2.0}, "ILS")
    assert summary.total_gifts == 3
    assert summary.total_recipients == 2
    assert summary.normalized_total == pytest.approx(600)
    assert summary.average_amount == pytest.approx(200)
    assert summary.multiple_gift_recipients == [("X", 2)]


def test_zero_total_with_rates_is_a_real_zero():
    summary = summarize([gift(0, "X")], [], {"ILS": 1.0})
    assert summary.average_amount == 0


def test_load_summary_uses_fetcher(db, make_user):
    owner = make_user("+100")
    calls = []

    def fetch(base):
        calls.append(base)
        return {}

    summary = analytics_service.load_summary(db, actor_id=owner.id, owner_id=owner.id, fetch_rates=fetch)
    assert calls == ["ILS"]
    assert summary.total_gifts == 0
    assert summary.rates_available is False
