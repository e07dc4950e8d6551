from __future__ import annotations

import asyncio
import json
from datetime import date, datetime, timezone

import httpx
import pytest

from saturday.client import (
    ApiError,
    AuthenticationRequired,
    AvailabilityCalendar,
    AvailabilityEntry,
    SaturdayClient,
    SessionStore,
    next_state,
)
from saturday.main import app
from saturday.models import AvailabilityState, UserAvailability
from saturday.services.calendar import upcoming_saturdays

PASSWORD = "password1"
DAY = date(2030, 1, 5)
OTHER_DAY = date(2030, 1, 12)


def _record(day: date, state: str) -> dict:
    stamp = datetime(2030, 1, 1, tzinfo=timezone.utc).isoformat()
    return {"user_id": 1, "date": day.isoformat(), "state": state, "created_at": stamp, "updated_at": stamp}


def _mock_client(handler) -> SaturdayClient:
    return SaturdayClient("http://testserver", transport=httpx.MockTransport(handler))


def _asgi_client() -> SaturdayClient:
    return SaturdayClient("http://testserver", transport=httpx.ASGITransport(app=app))


def test_next_state_cycle_closes():
    state = None
    seen = []
    for _ in range(3):
        state = next_state(state)
        seen.append(state)
    assert seen == [AvailabilityState.AVAILABLE, AvailabilityState.PLANNED, None]


# End-to-end against the real app


def test_first_click_marks_available_and_persists(client, db, alice):
    day = upcoming_saturdays(date.today())[0]

    async def scenario():
        async with _asgi_client() as api:
            await api.login("alice", PASSWORD)
            calendar = AvailabilityCalendar(api)
            await calendar.refresh()
            assert calendar.entries == {}
            state = await calendar.toggle(day)
            assert state == AvailabilityState.AVAILABLE
            assert calendar.state_for(day) == AvailabilityState.AVAILABLE
            server = await api.list_availability()
            return calendar, server

    calendar, server = asyncio.run(scenario())
    assert [(r["date"], r["state"]) for r in server] == [(day.isoformat(), "available")]
    assert calendar.notices == []
    record = db.query(UserAvailability).filter(UserAvailability.user_id == alice.id).one()
    assert record.state == AvailabilityState.AVAILABLE


def test_three_clicks_return_to_unset(client, db, alice):
    day = upcoming_saturdays(date.today())[0]

    async def scenario():
        async with _asgi_client() as api:
            await api.login("alice", PASSWORD)
            calendar = AvailabilityCalendar(api)
            for _ in range(3):
                await calendar.toggle(day)
            mirror = calendar.entries
            refreshed = await calendar.refresh()
            return mirror, refreshed

    mirror, refreshed = asyncio.run(scenario())
    assert mirror == {}
    assert refreshed == {}
    assert db.query(UserAvailability).count() == 0


def test_refresh_without_session_raises(client):
    async def scenario():
        async with _asgi_client() as api:
            await AvailabilityCalendar(api).refresh()

    with pytest.raises(AuthenticationRequired) as excinfo:
        asyncio.run(scenario())
    assert excinfo.value.status_code == 401


def test_session_store_is_filled_from_server(client, alice, bob, school):
    async def scenario():
        async with _asgi_client() as api:
            store = SessionStore(api)
            guest = await store.load()
            await store.login("alice@test.com", PASSWORD)
            directory = await store.load_directory()
            snapshot = (store.user["username"], store.school["slug"], [u["username"] for u in directory])
            await store.logout()
            return guest, snapshot, store

    guest, snapshot, store = asyncio.run(scenario())
    assert guest is None
    assert snapshot == ("alice", "test-school", ["bob"])
    assert not store.is_authenticated
    assert store.directory == []


def test_login_failure_raises_api_error(client, alice):
    async def scenario():
        async with _asgi_client() as api:
            await api.login("alice", "wrong-pass1")

    with pytest.raises(AuthenticationRequired):
        asyncio.run(scenario())


# Failure handling with a scripted server


def test_failed_mutation_reverts_and_notifies():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append((request.method, request.url.path))
        if request.method == "GET":
            return httpx.Response(200, json=[])
        return httpx.Response(500, json={"detail": "boom"})

    received = []

    async def scenario():
        async with _mock_client(handler) as api:
            calendar = AvailabilityCalendar(api, on_notice=received.append)
            await calendar.refresh()
            state = await calendar.toggle(DAY)
            return state, calendar

    state, calendar = asyncio.run(scenario())
    assert state == AvailabilityState.AVAILABLE
    assert calendar.entries == {}
    assert len(calendar.notices) == 1
    assert received == calendar.notices
    assert calendar.notices[0].day == DAY
    assert isinstance(calendar.notices[0].error, ApiError)
    assert requests[-1] == ("PATCH", f"/api/availability/{DAY.isoformat()}")


def test_failed_delete_restores_exact_entry():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json=[_record(DAY, "planned"), _record(OTHER_DAY, "available")])
        return httpx.Response(503)

    async def scenario():
        async with _mock_client(handler) as api:
            calendar = AvailabilityCalendar(api)
            before = await calendar.refresh()
            await calendar.toggle(DAY)
            return before, calendar.entries

    before, after = asyncio.run(scenario())
    assert after == before
    assert after[DAY] == AvailabilityEntry.from_api(_record(DAY, "planned"))


def test_transport_error_is_rolled_back():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    async def scenario():
        async with _mock_client(handler) as api:
            calendar = AvailabilityCalendar(api)
            await calendar.toggle(DAY)
            return calendar

    calendar = asyncio.run(scenario())
    assert calendar.entries == {}
    assert len(calendar.notices) == 1


def test_optimistic_write_happens_before_network():
    async def scenario():
        seen = []

        async def handler(request: httpx.Request) -> httpx.Response:
            seen.append(calendar.state_for(DAY))
            return httpx.Response(200, json=_record(DAY, "available"))

        async with _mock_client(handler) as api:
            calendar = AvailabilityCalendar(api)
            mutation = calendar.begin(DAY)
            assert calendar.state_for(DAY) == AvailabilityState.AVAILABLE
            assert calendar.has_pending(DAY)
            await calendar._dispatch(mutation)
            assert not calendar.has_pending()
            return seen

    assert asyncio.run(scenario()) == [AvailabilityState.AVAILABLE]


@pytest.mark.parametrize(
    "outcomes,expected",
    [
        ([500, 200], AvailabilityState.PLANNED),
        ([200, 500], AvailabilityState.AVAILABLE),
        ([500, 500], None),
        ([200, 200], AvailabilityState.PLANNED),
    ],
)
def test_same_date_clicks_are_serialized(outcomes, expected):
    sent = []

    async def scenario():
        async def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            sent.append(body["state"])
            await asyncio.sleep(0)
            status_code = outcomes[len(sent) - 1]
            return httpx.Response(status_code, json=_record(DAY, body["state"]))

        async with _mock_client(handler) as api:
            calendar = AvailabilityCalendar(api)
            await asyncio.gather(calendar.toggle(DAY), calendar.toggle(DAY))
            return calendar

    calendar = asyncio.run(scenario())
    assert sent == ["available", "planned"]
    assert calendar.state_for(DAY) == expected
    assert len(calendar.notices) == outcomes.count(500)
    assert not calendar.has_pending()


def test_different_dates_are_dispatched_concurrently():
    async def scenario():
        arrived = set()
        both_arrived = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            arrived.add(request.url.path)
            if len(arrived) == 2:
                both_arrived.set()
            await asyncio.wait_for(both_arrived.wait(), timeout=2)
            day = date.fromisoformat(request.url.path.rsplit("/", 1)[-1])
            return httpx.Response(200, json=_record(day, "available"))

        async with _mock_client(handler) as api:
            calendar = AvailabilityCalendar(api)
            await asyncio.gather(calendar.toggle(DAY), calendar.toggle(OTHER_DAY))
            return calendar

    calendar = asyncio.run(scenario())
    assert calendar.state_for(DAY) == AvailabilityState.AVAILABLE
    assert calendar.state_for(OTHER_DAY) == AvailabilityState.AVAILABLE
    assert calendar.notices == []


def test_unreadable_success_body_is_rolled_back():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json=[])
        return httpx.Response(200, text="<html>proxy login</html>")

    async def scenario():
        async with _mock_client(handler) as api:
            calendar = AvailabilityCalendar(api)
            await calendar.refresh()
            state = await calendar.toggle(DAY)
            return state, calendar

    state, calendar = asyncio.run(scenario())
    assert state == AvailabilityState.AVAILABLE
    assert calendar.entries == {}
    assert len(calendar.notices) == 1
    assert calendar.notices[0].error.detail == "Invalid JSON response"
    assert not calendar.has_pending()


def test_entry_accepts_utc_z_suffix():
    payload = {"date": "2030-01-05", "state": "planned", "updated_at": "2030-01-01T12:30:00Z"}
    entry = AvailabilityEntry.from_api(payload)
    assert entry.updated_at == datetime(2030, 1, 1, 12, 30, tzinfo=timezone.utc)
    assert entry.state == AvailabilityState.PLANNED
