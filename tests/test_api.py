from datetime import timedelta

import pytest

from wedledger.core.config import settings
from wedledger.db.base import UserConnection
from wedledger.models import utcnow


def login(client, sms, phone):
    assert client.post("/otp/send", json={"phone": phone}).json() == {"success": True, "recipients": 1}
    resp = client.post("/otp/verify", json={"phone": phone, "otp": sms.last_code(phone)})
    assert resp.status_code == 200
    return resp.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_otp_flow_and_profile(client, sms):
    body = login(client, sms, "0501112222")
    assert body["success"] is True
    assert body["user"]["phone"] == "0501112222"
    assert body["user"]["familyCount"] == 0
    assert body["user"]["giftsCount"] == 0
    token = body["session"]["accessToken"]

    headers = {"Authorization": f"Bearer {token}"}
    resp = client.patch("/users/me", json={"firstname": "Dana", "lastname": "Levi"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["user"]["firstname"] == "Dana"
    assert client.get("/users/me", headers=headers).json()["user"]["lastname"] == "Levi"

    assert client.get("/users/me").status_code == 401


def test_otp_errors(client, sms):
    resp = client.post("/otp/send", json={})
    assert resp.status_code == 400
    assert resp.json() == {"error": "phone is required"}

    resp = client.post("/otp/verify", json={"phone": "0509999999", "otp": "123456"})
    assert resp.status_code == 404
    assert resp.json() == {"error": "User not found. Please request OTP first."}

    sms.success = False
    resp = client.post("/otp/send", json={"phone": "0501112222"})
    assert resp.status_code == 500
    assert "error" in resp.json()


def test_sharing_scenario(client, sms):
    u1 = login(client, sms, "+100")["user"]["id"]
    u2 = login(client, sms, "+200")["user"]["id"]

    resp = client.post("/invites/generate", json={"childUserId": u1, "parentPhone": "+200", "permission": "read"})
    assert resp.status_code == 200
    invite = resp.json()
    assert invite["parentUser"]["id"] == u2
    assert invite["inviteUrl"].endswith(invite["inviteToken"])

    preview = client.get("/invites/accept", params={"token": invite["inviteToken"]}).json()
    assert preview["connection"]["is_expired"] is False
    assert preview["connection"]["child_user"]["id"] == u1

    resp = client.post("/invites/accept", json={"token": invite["inviteToken"], "parentUserId": u2})
    assert resp.status_code == 200
    accepted = resp.json()
    conn_id = accepted["connection"]["id"]
    assert accepted["connection"]["status"] == "accepted"
    assert accepted["connection"]["permission"] == "read"
    assert accepted["childUser"]["id"] == u1

    # the owner cannot change the permission, the viewer can
    resp = client.patch(f"/connections/{conn_id}", json={"userId": u1, "permission": "read_write"})
    assert resp.status_code == 404
    resp = client.patch(f"/connections/{conn_id}", json={"parentUserId": u2, "permission": "read_write"})
    assert resp.json() == {"success": True}

    mine = client.get("/connections/my-connections", params={"childUserId": u1}).json()
    assert mine["connections"][0]["permission"] == "read_write"
    assert mine["connections"][0]["parent_user"]["id"] == u2

    shared = client.get("/connections/shared", params={"parentUserId": u2}).json()
    assert [c["child_user"]["id"] for c in shared["connections"]] == [u1]

    assert client.post("/connections/view", json={"parentUserId": u2, "childUserId": u1}).status_code == 200
    notes = client.get("/notifications", params={"userId": u1}).json()
    assert {n["type"] for n in notes["notifications"]} == {"permission_update", "viewed"}
    assert notes["unreadCount"] == 2

    resp = client.request("DELETE", f"/connections/{conn_id}", json={"userId": u1, "role": "owner"})
    assert resp.json() == {"success": True}
    resp = client.request("DELETE", f"/connections/{conn_id}", json={"userId": u1, "role": "owner"})
    assert resp.status_code == 404


def test_accept_twice_and_missing_token(client, sms):
    u1 = login(client, sms, "+100")["user"]["id"]
    u2 = login(client, sms, "+200")["user"]["id"]
    token = client.post(
        "/invites/generate", json={"childUserId": u1, "parentPhone": "+200", "permission": "read"}
    ).json()["inviteToken"]

    assert client.post("/invites/accept", json={"token": token, "parentUserId": u2}).status_code == 200
    resp = client.post("/invites/accept", json={"token": token, "parentUserId": u2})
    assert resp.status_code == 400
    assert resp.json() == {"error": "This invite has already been accepted"}

    resp = client.get("/invites/accept")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invite token is required"}


def test_expired_invite_over_http(client, sms, session_factory):
    u1 = login(client, sms, "+100")["user"]["id"]
    u2 = login(client, sms, "+200")["user"]["id"]
    token = client.post(
        "/invites/generate", json={"childUserId": u1, "parentPhone": "+200", "permission": "read"}
    ).json()["inviteToken"]

    with session_factory() as db:
        conn = db.query(UserConnection).filter_by(invite_token=token).one()
        conn.invite_expires_at = utcnow() - timedelta(minutes=1)
        db.commit()

    assert client.get("/invites/accept", params={"token": token}).json()["connection"]["is_expired"] is True
    resp = client.post("/invites/accept", json={"token": token, "parentUserId": u2})
    assert resp.json() == {"error": "This invite has expired"}


def test_invite_sms_only_when_enabled(client, sms, monkeypatch):
    u1 = login(client, sms, "+100")["user"]["id"]
    login(client, sms, "+200")
    sent_before = len(sms.sent)

    client.post("/invites/generate", json={"childUserId": u1, "parentPhone": "+200", "permission": "read"})
    assert len(sms.sent) == sent_before

    monkeypatch.setattr(settings, "SEND_INVITE_SMS", True)
    invite = client.post(
        "/invites/generate", json={"childUserId": u1, "parentPhone": "+200", "permission": "read"}
    ).json()
    assert sms.sent[-1][0] == "+200"
    assert invite["inviteUrl"] in sms.sent[-1][1]


def test_ledger_and_analytics_over_http(client, sms, rates):
    u1 = login(client, sms, "+100")["user"]["id"]
    u2 = login(client, sms, "+200")["user"]["id"]

    member = client.post("/family-members", json={"userId": u1, "name": "Alice"}).json()["familyMember"]
    for amount, to in [(100, "Noa"), (50, "Noa")]:
        resp = client.post(
            "/gifts",
            json={"userId": u1, "amount": amount, "recipientName": to, "fromMemberId": member["id"], "date": "2024-03-01"},
        )
        assert resp.status_code == 200
    client.post("/gifts", json={"userId": u1, "amount": 50, "currency": "USD", "recipientName": "Tal", "date": "2024-04-10"})

    # not shared yet
    assert client.get("/gifts", params={"userId": u2, "ownerUserId": u1}).status_code == 404

    token = client.post(
        "/invites/generate", json={"childUserId": u1, "parentPhone": "+200", "permission": "read"}
    ).json()["inviteToken"]
    client.post("/invites/accept", json={"token": token, "parentUserId": u2})

    gifts = client.get("/gifts", params={"userId": u2, "ownerUserId": u1}).json()["gifts"]
    assert len(gifts) == 3
    resp = client.post("/gifts", json={"userId": u2, "ownerUserId": u1, "amount": 1, "recipientName": "X", "date": "2024-01-01"})
    assert resp.status_code == 404

    summary = client.get("/analytics", params={"userId": u2, "ownerUserId": u1}).json()
    assert summary["totalGifts"] == 3
    assert summary["ratesAvailable"] is True
    assert summary["normalizedTotal"] == pytest.approx(150 + 50 * rates["USD"])
    assert summary["byFamilyMember"][0] == {"name": "Alice", "color": "#e91e63", "count": 2, "amount": 150}
    assert summary["multipleGiftRecipients"] == [{"name": "Noa", "count": 2}]
    assert summary["timeline"] == [{"month": "Mar 2024", "gifts": 2}, {"month": "Apr 2024", "gifts": 1}]


def test_future_events_over_http(client, sms):
    u1 = login(client, sms, "+100")["user"]["id"]
    created = client.post("/future-events", json={"userId": u1, "name": "Cousin's wedding", "date": "2030-06-01"})
    event = created.json()["event"]
    assert event["name"] == "Cousin's wedding"

    resp = client.patch(f"/future-events/{event['id']}", json={"userId": u1, "notes": "bring cash"})
    assert resp.json()["event"]["notes"] == "bring cash"
    assert len(client.get("/future-events", params={"userId": u1}).json()["events"]) == 1

    assert client.delete(f"/future-events/{event['id']}", params={"userId": u1}).json() == {"success": True}
    assert client.get("/future-events", params={"userId": u1}).json()["events"] == []


def test_gift_patch_with_null_required_field_is_400(client, sms):
    u1 = login(client, sms, "+100")["user"]["id"]
    gift = client.post(
        "/gifts", json={"userId": u1, "amount": 100, "recipientName": "Noa", "date": "2024-03-01"}
    ).json()["gift"]

    for field in ("currency", "date"):
        resp = client.patch(f"/gifts/{gift['id']}", json={"userId": u1, field: None})
        assert resp.status_code == 400
        assert resp.json() == {"error": f"{field.capitalize()} is required"}


def test_event_types_over_http(client, sms):
    u1 = login(client, sms, "+100")["user"]["id"]
    created = client.post("/event-types", json={"userId": u1, "name": "Wedding"})
    assert created.status_code == 200
    type_id = created.json()["eventType"]["id"]

    assert client.post("/event-types", json={"userId": u1, "name": "Wedding"}).status_code == 400
    resp = client.patch(f"/event-types/{type_id}", json={"userId": u1, "name": "Henna"})
    assert resp.json()["eventType"]["name"] == "Henna"
    assert [t["name"] for t in client.get("/event-types", params={"userId": u1}).json()["eventTypes"]] == ["Henna"]
    assert client.get("/event-types/suggestions", params={"userId": u1}).json()["names"] == ["Henna"]

    assert client.delete(f"/event-types/{type_id}", params={"userId": u1}).json() == {"success": True}
    assert client.get("/event-types", params={"userId": u1}).json()["eventTypes"] == []
