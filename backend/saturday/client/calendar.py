"""Optimistic availability calendar.

Each date cycles unset -> available -> planned -> unset. A toggle updates the
local mirror before any network I/O, then sends the matching PATCH or DELETE.
A failed request puts back exactly what that toggle replaced and records a
notice; a successful one leaves the mirror alone.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import httpx
from pydantic import TypeAdapter

from saturday.client.api import ApiError, SaturdayClient
from saturday.models.enums import AvailabilityState

logger = logging.getLogger(__name__)

_DATETIME = TypeAdapter(datetime)

_CYCLE = {
    None: AvailabilityState.AVAILABLE,
    AvailabilityState.AVAILABLE: AvailabilityState.PLANNED,
    AvailabilityState.PLANNED: None,
}


def next_state(current: Optional[AvailabilityState]) -> Optional[AvailabilityState]:
    return _CYCLE[current]


@dataclass(frozen=True)
class AvailabilityEntry:
    date: date
    state: AvailabilityState
    updated_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "AvailabilityEntry":
        updated_at = payload.get("updated_at")
        return cls(
            date=date.fromisoformat(payload["date"]),
            state=AvailabilityState(payload["state"]),
            updated_at=_DATETIME.validate_python(updated_at) if updated_at else None,
        )


@dataclass(eq=False)
class PendingMutation:
    """One toggle in flight: the value it replaced and the state it asked for."""

    day: date
    previous: Optional[AvailabilityEntry]
    target: Optional[AvailabilityState]


@dataclass(frozen=True)
class Notice:
    day: date
    message: str
    error: Exception = field(compare=False)


class AvailabilityCalendar:
    def __init__(
        self,
        client: SaturdayClient,
        *,
        on_notice: Optional[Callable[[Notice], None]] = None,
    ) -> None:
        self.client = client
        self.on_notice = on_notice
        self.notices: List[Notice] = []
        self._entries: Dict[date, AvailabilityEntry] = {}
        self._pending: Dict[date, List[PendingMutation]] = {}
        self._locks: Dict[date, asyncio.Lock] = {}

    @property
    def entries(self) -> Dict[date, AvailabilityEntry]:
        return dict(self._entries)

    def state_for(self, day: date) -> Optional[AvailabilityState]:
        entry = self._entries.get(day)
        return entry.state if entry else None

    def has_pending(self, day: Optional[date] = None) -> bool:
        if day is not None:
            return bool(self._pending.get(day))
        return any(self._pending.values())

    async def refresh(self, start: Optional[date] = None, end: Optional[date] = None) -> Dict[date, AvailabilityEntry]:
        records = await self.client.list_availability(start, end)
        self._entries = {entry.date: entry for entry in (AvailabilityEntry.from_api(r) for r in records)}
        return self.entries

    def begin(self, day: date) -> PendingMutation:
        """Apply the next state locally and register the mutation; no I/O."""
        previous = self._entries.get(day)
        target = next_state(previous.state if previous else None)
        mutation = PendingMutation(day=day, previous=previous, target=target)
        self._put(day, AvailabilityEntry(day, target, datetime.now(timezone.utc)) if target else None)
        self._pending.setdefault(day, []).append(mutation)
        return mutation

    async def toggle(self, day: date) -> Optional[AvailabilityState]:
        """Advance ``day`` one step and sync it; returns the optimistic state."""
        mutation = self.begin(day)
        await self._dispatch(mutation)
        return mutation.target

    async def _dispatch(self, mutation: PendingMutation) -> None:
        lock = self._locks.setdefault(mutation.day, asyncio.Lock())
        try:
            async with lock:
                if mutation.target is None:
                    await self.client.clear_availability(mutation.day)
                else:
                    await self.client.set_availability(mutation.day, mutation.target)
        except (ApiError, httpx.HTTPError) as exc:
            self._rollback(mutation)
            self._notify(mutation, exc)
        finally:
            queue = self._pending.get(mutation.day, [])
            if mutation in queue:
                queue.remove(mutation)
            if not queue:
                self._pending.pop(mutation.day, None)

    def _rollback(self, mutation: PendingMutation) -> None:
        queue = self._pending.get(mutation.day, [])
        index = queue.index(mutation)
        if index == len(queue) - 1:
            self._put(mutation.day, mutation.previous)
        else:
            # A later toggle already replaced our value; it now owns the restore point.
            queue[index + 1].previous = mutation.previous

    def _put(self, day: date, entry: Optional[AvailabilityEntry]) -> None:
        if entry is None:
            self._entries.pop(day, None)
        else:
            self._entries[day] = entry

    def _notify(self, mutation: PendingMutation, exc: Exception) -> None:
        logger.warning("availability_update_failed date=%s error=%s", mutation.day.isoformat(), exc)
        notice = Notice(
            day=mutation.day,
            message=f"Could not update availability for {mutation.day.isoformat()}; change reverted.",
            error=exc,
        )
        self.notices.append(notice)
        if self.on_notice:
            self.on_notice(notice)
