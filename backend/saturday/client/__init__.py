from saturday.client.api import ApiError, AuthenticationRequired, SaturdayClient
from saturday.client.calendar import AvailabilityCalendar, AvailabilityEntry, Notice, next_state
from saturday.client.store import SessionStore

__all__ = [
    "ApiError",
    "AuthenticationRequired",
    "AvailabilityCalendar",
    "AvailabilityEntry",
    "Notice",
    "SaturdayClient",
    "SessionStore",
    "next_state",
]
