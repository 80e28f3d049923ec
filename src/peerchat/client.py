"""
AsyncPeerChat: main SDK client.

Holds the REST client and the auth state across sessions. A `ChatSession`
is constructed on login (`open_session`) and torn down on logout or when
the identity changes.
"""

from pathlib import Path
from typing import Any, Optional, Union

import httpx

from peerchat.auth import Auth
from peerchat.errors import AuthError
from peerchat.models.user import AuthState
from peerchat.send import Notifier
from peerchat.session import ChatSession
from peerchat.transport.http import DEFAULT_BASE_URL, HttpClient


class AsyncPeerChat:
    """Async peerchat client."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        auth_state: Optional[AuthState] = None,
        socket_url: Optional[str] = None,
        transports: Optional[list[str]] = None,
        notify: Optional[Notifier] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._socket_url = socket_url or base_url
        self._transports = transports
        self._notify = notify
        self.auth_state = auth_state

        self.http = HttpClient(
            base_url=base_url,
            token=auth_state.token if auth_state else None,
            transport=http_transport,
        )
        self.auth = Auth(self.http)
        self.session: Optional[ChatSession] = None

    async def login(self, email: str, password: str) -> AuthState:
        await self._end_session()
        self.auth_state = await self.auth.login(email, password)
        return self.auth_state

    async def register(
        self, username: str, email: str, password: str, photo: Optional[Union[str, Path]] = None,
    ) -> AuthState:
        await self._end_session()
        self.auth_state = await self.auth.register(username, email, password, photo=photo)
        return self.auth_state

    async def open_session(self) -> ChatSession:
        """Start a session for the current identity, replacing any open one."""
        if self.auth_state is None:
            raise AuthError("Not logged in. Call login() or register() first.")
        await self._end_session()
        self.session = ChatSession(
            self.auth_state,
            self.http,
            socket_url=self._socket_url,
            notify=self._notify,
            transports=self._transports,
        )
        return await self.session.start()

    async def update_profile_photo(self, photo: Union[str, Path]) -> AuthState:
        """Upload a new avatar and refresh it on the stored identity."""
        if self.auth_state is None:
            raise AuthError("Not logged in. Call login() or register() first.")
        profile_photo = await self.auth.update_profile_photo(photo)
        self.auth_state = self.auth_state.with_profile_photo(profile_photo)
        return self.auth_state

    async def logout(self) -> None:
        await self._end_session()
        self.auth.logout()
        self.auth_state = None

    async def _end_session(self) -> None:
        if self.session is not None:
            await self.session.close()
            self.session = None

    async def close(self) -> None:
        await self._end_session()
        await self.http.close()

    async def __aenter__(self) -> "AsyncPeerChat":
        return self

    async def __aexit__(self, *_exc: Any) -> None:
        await self.close()
