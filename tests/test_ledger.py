from datetime import date

import pytest

from wedledger.core.errors import ConflictError, NotFoundError, ValidationError
from wedledger.services import connection_service, event_service, ledger_service
from wedledger.services.ledger_service import LedgerAccess


@pytest.fixture()
def owner(make_user):
    return make_user("+100", "Dana", "Levi")


@pytest.fixture()
def viewer(make_user):
    return make_user("+200", "Avi", "Cohen")


def _share(db, owner, viewer, permission):
    invite = connection_service.generate_invite(db, owner_id=owner.id, viewer_phone=viewer.phone, permission=permission)
    connection_service.accept_invite(db, token=invite.connection.invite_token, viewer_id=viewer.id)
    return invite.connection


def _gift(db, actor, owner, **kwargs):
    values = dict(amount=250, recipient_name="Noa & Tal", date=date(2024, 6, 1))
    values.update(kwargs)
    return ledger_service.create_gift(db, actor_id=actor.id, owner_id=owner.id, **values)


def test_resolve_access(db, owner, viewer, make_user):
    assert ledger_service.resolve_access(db, actor_id=owner.id, owner_id=owner.id) is LedgerAccess.OWNER
    with pytest.raises(NotFoundError):
        ledger_service.resolve_access(db, actor_id=viewer.id, owner_id=owner.id)

    _share(db, owner, viewer, "read")
    assert ledger_service.resolve_access(db, actor_id=viewer.id, owner_id=owner.id) is LedgerAccess.READ


def test_pending_invite_grants_nothing(db, owner, viewer):
    connection_service.generate_invite(db, owner_id=owner.id, viewer_phone=viewer.phone, permission="read_write")
    with pytest.raises(NotFoundError):
        ledger_service.list_gifts(db, actor_id=viewer.id, owner_id=owner.id)


def test_owner_gift_crud(db, owner):
    gift = _gift(db, owner, owner, currency="usd")
    assert gift.currency == "USD"

    updated = ledger_service.update_gift(
        db, actor_id=owner.id, owner_id=owner.id, gift_id=gift.id, changes={"amount": 300, "notes": "cash"}
    )
    assert updated.amount == 300
    assert updated.notes == "cash"

    ledger_service.delete_gift(db, actor_id=owner.id, owner_id=owner.id, gift_id=gift.id)
    assert ledger_service.list_gifts(db, actor_id=owner.id, owner_id=owner.id) == []


def test_read_only_viewer_can_read_but_not_write(db, owner, viewer):
    gift = _gift(db, owner, owner)
    _share(db, owner, viewer, "read")

    assert [g.id for g in ledger_service.list_gifts(db, actor_id=viewer.id, owner_id=owner.id)] == [gift.id]
    with pytest.raises(NotFoundError):
        _gift(db, viewer, owner)
    with pytest.raises(NotFoundError):
        ledger_service.delete_gift(db, actor_id=viewer.id, owner_id=owner.id, gift_id=gift.id)


def test_read_write_viewer_can_add_gifts(db, owner, viewer):
    _share(db, owner, viewer, "read_write")
    gift = _gift(db, viewer, owner)
    assert gift.user_id == owner.id


def test_gift_validation(db, owner, make_user):
    with pytest.raises(ValidationError):
        _gift(db, owner, owner, amount=-1)
    with pytest.raises(ValidationError):
        _gift(db, owner, owner, recipient_name="  ")

    stranger = make_user("+300")
    foreign = ledger_service.create_family_member(db, owner_id=stranger.id, name="Other")
    with pytest.raises(NotFoundError):
        _gift(db, owner, owner, from_member_id=foreign.id)


def test_family_members(db, owner, viewer):
    member = ledger_service.create_family_member(db, owner_id=owner.id, name=" Savta ")
    assert member.name == "Savta"
    assert member.color == "#e91e63"
    gift = _gift(db, owner, owner, from_member_id=member.id)

    _share(db, owner, viewer, "read")
    listed = ledger_service.list_family_members(db, actor_id=viewer.id, owner_id=owner.id)
    assert [m.id for m in listed] == [member.id]

    with pytest.raises(NotFoundError):
        ledger_service.update_family_member(db, member_id=member.id, owner_id=viewer.id, name="x")
    renamed = ledger_service.update_family_member(db, member_id=member.id, owner_id=owner.id, color="#000000")
    assert renamed.color == "#000000"

    ledger_service.delete_family_member(db, member_id=member.id, owner_id=owner.id)
    db.refresh(gift)
    assert gift.from_member_id is None


def test_future_events(db, owner, viewer):
    later = event_service.create_event(db, user_id=owner.id, name="Wedding", date=date(2030, 5, 1), event_type="wedding")
    event_service.create_event(db, user_id=owner.id, name="Old", date=date(2020, 5, 1))

    assert [e.name for e in event_service.list_events(db, user_id=owner.id)] == ["Old", "Wedding"]
    assert [e.id for e in event_service.list_events(db, user_id=owner.id, upcoming_from=date(2025, 1, 1))] == [later.id]

    with pytest.raises(NotFoundError):
        event_service.update_event(db, event_id=later.id, user_id=viewer.id, changes={"name": "Hijack"})
    with pytest.raises(ValidationError):
        event_service.update_event(db, event_id=later.id, user_id=owner.id, changes={"name": ""})

    moved = event_service.update_event(db, event_id=later.id, user_id=owner.id, changes={"date": date(2031, 1, 1)})
    assert moved.date == date(2031, 1, 1)

    event_service.delete_event(db, event_id=later.id, user_id=owner.id)
    with pytest.raises(NotFoundError):
        event_service.delete_event(db, event_id=later.id, user_id=owner.id)


@pytest.mark.parametrize("field", ["currency", "date"])
def test_update_gift_rejects_clearing_required_fields(db, owner, field):
    gift = _gift(db, owner, owner)
    with pytest.raises(ValidationError):
        ledger_service.update_gift(db, actor_id=owner.id, owner_id=owner.id, gift_id=gift.id, changes={field: None})
    db.refresh(gift)
    assert gift.currency == "ILS"
    assert gift.date == date(2024, 6, 1)


def test_event_types(db, owner, viewer):
    wedding = event_service.create_event_type(db, user_id=owner.id, name=" Wedding ")
    event_service.create_event_type(db, user_id=owner.id, name="Brit")
    assert wedding.name == "Wedding"
    assert [t.name for t in event_service.list_event_types(db, user_id=owner.id)] == ["Brit", "Wedding"]
    assert event_service.list_event_types(db, user_id=viewer.id) == []

    with pytest.raises(ConflictError):
        event_service.create_event_type(db, user_id=owner.id, name="Wedding")
    with pytest.raises(ValidationError):
        event_service.create_event_type(db, user_id=owner.id, name="  ")
    with pytest.raises(NotFoundError):
        event_service.rename_event_type(db, type_id=wedding.id, user_id=viewer.id, name="Mine")

    renamed = event_service.rename_event_type(db, type_id=wedding.id, user_id=owner.id, name="Wedding")
    assert renamed.name == "Wedding"
    renamed = event_service.rename_event_type(db, type_id=wedding.id, user_id=owner.id, name="Henna")
    assert renamed.name == "Henna"

    with pytest.raises(NotFoundError):
        event_service.delete_event_type(db, type_id=wedding.id, user_id=viewer.id)
    event_service.delete_event_type(db, type_id=wedding.id, user_id=owner.id)
    assert [t.name for t in event_service.list_event_types(db, user_id=owner.id)] == ["Brit"]


def test_event_type_suggestions_include_used_types(db, owner):
    event_service.create_event_type(db, user_id=owner.id, name="Wedding")
    event_service.create_event(db, user_id=owner.id, name="Cousin", date=date(2030, 1, 1), event_type="Wedding")
    event_service.create_event(db, user_id=owner.id, name="Friend", date=date(2030, 2, 1), event_type="Bar mitzvah")
    event_service.create_event(db, user_id=owner.id, name="Other", date=date(2030, 3, 1))
    assert event_service.event_type_suggestions(db, user_id=owner.id) == ["Wedding", "Bar mitzvah"]
