from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from saturday.client.api import AuthenticationRequired, SaturdayClient


@dataclass
class SessionStore:
    """Client-side session data, only ever filled from server responses."""

    client: SaturdayClient
    user: Optional[Dict[str, Any]] = None
    school: Optional[Dict[str, Any]] = None
    directory: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def _apply(self, payload: Optional[Dict[str, Any]]) -> None:
        payload = payload or {}
        self.user = payload.get("user")
        self.school = payload.get("school")
        if self.user is None:
            self.directory = []

    async def login(self, login: str, password: str) -> Optional[Dict[str, Any]]:
        self._apply(await self.client.login(login, password))
        return self.user

    async def register(self, **fields: Any) -> Optional[Dict[str, Any]]:
        self._apply(await self.client.register(**fields))
        return self.user

    async def load(self) -> Optional[Dict[str, Any]]:
        self._apply(await self.client.me())
        return self.user

    async def load_directory(self) -> List[Dict[str, Any]]:
        if self.school is None:
            self.directory = []
            return self.directory
        try:
            self.directory = await self.client.school_users()
        except AuthenticationRequired:
            self._apply(None)
            raise
        return self.directory

    async def logout(self) -> None:
        await self.client.logout()
        self._apply(None)
