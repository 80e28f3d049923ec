"""
Roster REST API: candidate peers for the local user.
"""

from typing import Optional

from peerchat.models.user import User
from peerchat.transport.http import HttpClient


class RosterAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def list_users(self, exclude: Optional[str] = None) -> list[User]:
        """GET /auth/users, minus `exclude` (normally the local user)."""
        data = await self._http.get("/auth/users")
        users = [User.model_validate(item) for item in data or []]
        return [u for u in users if u.id != exclude]
