from __future__ import annotations

from datetime import date, timedelta

import pytest

from saturday.core.settings import settings
from saturday.models import UserAvailability
from saturday.services.calendar import upcoming_saturdays


@pytest.fixture()
def saturday_day() -> date:
    return upcoming_saturdays(date.today())[1]


def test_requires_cookie(client):
    response = client.get("/api/availability")
    assert response.status_code == 401
    assert response.json() == {"detail": "Authentication required"}
    assert "set-cookie" not in response.headers


def test_tampered_cookie_is_rejected_and_cleared(client):
    client.cookies.set(settings.auth_cookie_name, "abc.def.ghi")
    response = client.patch("/api/availability/2030-01-05", json={"state": "available"})
    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid or expired token"}
    assert "Max-Age=0" in response.headers["set-cookie"]


def test_tenant_gate_keeps_cookie(client, make_user, login_as):
    loner = make_user("loner")
    login_as(loner, None)
    response = client.get("/api/availability")
    assert response.status_code == 403
    assert response.json() == {"detail": "School access required"}
    assert "set-cookie" not in response.headers


def test_upsert_then_flip_then_delete(client, db, alice, school, login_as, saturday_day):
    login_as(alice, school)
    path = f"/api/availability/{saturday_day.isoformat()}"

    response = client.patch(path, json={"state": "available"})
    assert response.status_code == 200
    assert response.json()["state"] == "available"
    assert response.json()["user_id"] == alice.id

    response = client.patch(path, json={"state": "planned"})
    assert response.status_code == 200
    assert response.json()["state"] == "planned"
    assert db.query(UserAvailability).filter(UserAvailability.user_id == alice.id).count() == 1

    assert client.delete(path).status_code == 204
    assert db.query(UserAvailability).filter(UserAvailability.user_id == alice.id).count() == 0
    assert client.delete(path).status_code == 204


def test_rejects_unknown_state(client, alice, school, login_as, saturday_day):
    login_as(alice, school)
    response = client.patch(f"/api/availability/{saturday_day.isoformat()}", json={"state": "maybe"})
    assert response.status_code == 422


def test_list_is_scoped_to_caller_and_range(client, alice, bob, school, login_as):
    first, second, third = upcoming_saturdays(date.today())[:3]
    login_as(bob, school)
    client.patch(f"/api/availability/{first.isoformat()}", json={"state": "planned"})

    login_as(alice, school)
    client.patch(f"/api/availability/{first.isoformat()}", json={"state": "available"})
    client.patch(f"/api/availability/{third.isoformat()}", json={"state": "planned"})

    records = client.get("/api/availability").json()
    assert [(r["date"], r["state"]) for r in records] == [
        (first.isoformat(), "available"),
        (third.isoformat(), "planned"),
    ]

    records = client.get(
        "/api/availability",
        params={"startDate": first.isoformat(), "endDate": second.isoformat()},
    ).json()
    assert [r["date"] for r in records] == [first.isoformat()]


def test_default_window_excludes_far_future(client, alice, school, login_as):
    login_as(alice, school)
    far = date.today() + timedelta(days=200)
    client.patch(f"/api/availability/{far.isoformat()}", json={"state": "available"})
    assert client.get("/api/availability").json() == []
    records = client.get("/api/availability", params={"endDate": far.isoformat()}).json()
    assert len(records) == 1


def test_inverted_range_is_rejected(client, alice, school, login_as):
    login_as(alice, school)
    response = client.get("/api/availability", params={"startDate": "2030-02-01", "endDate": "2030-01-01"})
    assert response.status_code == 400
