"""
ChatSession: everything that lives between login and logout.

Owns the single live connection and the single session-wide timeline, and
wires the presence tracker and conversation store to the connection's event
stream. The UI collaborator reads `view()`, `is_online()`, `state`,
`loading` and `sending`, and drives the session with `select_peer()` and
`submit()`.
"""

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional, Union

from peerchat.conversation import ConversationStore
from peerchat.errors import ConnectionError, HistoryError
from peerchat.history import HistoryLoader
from peerchat.models.message import Message
from peerchat.models.state import ConnectionState, Notice
from peerchat.models.user import AuthState, User
from peerchat.presence import PresenceTracker
from peerchat.roster import RosterAPI
from peerchat.send import Notifier, SendPipeline
from peerchat.transport.http import HttpClient
from peerchat.transport.socketio import ConnectionManager

logger = logging.getLogger(__name__)


def log_notice(notice: Notice) -> None:
    level = logging.ERROR if notice.level == "error" else logging.INFO
    logger.log(level, "%s", notice.text)


class ChatSession:
    def __init__(
        self,
        auth_state: AuthState,
        http: HttpClient,
        socket_url: Optional[str] = None,
        notify: Optional[Notifier] = None,
        transports: Optional[list[str]] = None,
    ):
        self._auth_state = auth_state
        self._notify = notify or log_notice
        local_id = auth_state.user.id

        self.connection = ConnectionManager(
            socket_url or http.base_url, token=auth_state.token, transports=transports,
        )
        self.presence = PresenceTracker()
        self.store = ConversationStore(local_id)
        self.history = HistoryLoader(http)
        self.roster = RosterAPI(http)
        self.pipeline = SendPipeline(local_id, self.connection, self.store, http, self._notify)

        self.users: list[User] = []
        self._selected: Optional[str] = None
        self._generation = 0
        self._history_task: Optional[asyncio.Task[None]] = None
        self._unsubscribe: list[Callable[[], None]] = []
        self._closed = False

    @property
    def local_user(self) -> User:
        return self._auth_state.user

    @property
    def selected_peer(self) -> Optional[str]:
        return self._selected

    @property
    def state(self) -> ConnectionState:
        return self.connection.state

    @property
    def loading(self) -> bool:
        return self.store.loading

    @property
    def sending(self) -> bool:
        return self.pipeline.sending

    async def start(self) -> "ChatSession":
        """Subscribe to the live stream and connect.

        A transport failure is logged and the session carries on
        disconnected, with presence and live messages inert.
        """
        self._unsubscribe = [
            self.connection.on_presence_snapshot(self.presence.update),
            self.connection.on_inbound_message(self.store.append),
        ]
        try:
            await self.connection.connect(self.local_user.id)
        except ConnectionError as e:
            logger.error("Live transport unavailable, continuing disconnected: %s", e)
        return self

    async def load_roster(self) -> list[User]:
        """One-shot roster fetch, excluding the local user."""
        try:
            self.users = await self.roster.list_users(exclude=self.local_user.id)
        except Exception as e:
            logger.warning("Roster fetch failed: %s", e)
            self._notify(Notice(level="error", text="Failed to load users"))
            self.users = []
        return self.users

    async def select_peer(self, peer_user_id: str) -> None:
        """Make `peer_user_id` the active conversation and load its history.

        A history load still running for an earlier selection is cancelled.
        """
        if self._history_task and not self._history_task.done():
            self._history_task.cancel()
        self._generation += 1
        self._selected = peer_user_id
        self.store.begin_load(peer_user_id)

        task = asyncio.get_running_loop().create_task(self._load_history(peer_user_id, self._generation))
        self._history_task = task
        try:
            # asyncio.wait does not raise when a newer selection cancels `task`
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise

    async def _load_history(self, peer_user_id: str, generation: int) -> None:
        try:
            messages = await self.history.fetch_history(peer_user_id)
        except HistoryError as e:
            logger.warning("%s", e)
            if generation == self._generation:
                # the prior view is discarded even though nothing replaces it
                self.store.replace_history(peer_user_id, [])
            self._notify(Notice(level="error", text="Failed to load messages"))
            return
        if generation != self._generation:
            logger.debug("Discarding stale history for %s", peer_user_id)
            return
        self.store.replace_history(peer_user_id, messages)

    async def submit(
        self,
        text: Optional[str] = None,
        attachment: Optional[Union[str, Path]] = None,
    ) -> Optional[Message]:
        """Send to the selected peer. No-op without a selection."""
        if self._selected is None:
            return None
        return await self.pipeline.submit(self._selected, text, attachment)

    def view(self) -> list[Message]:
        """The active conversation; empty while its history is loading."""
        if self._selected is None or self.store.loading:
            return []
        return self.store.view_for(self._selected)

    def is_online(self, user_id: str) -> bool:
        return self.presence.is_online(user_id)

    async def close(self) -> None:
        """Tear down connection and timeline together. Idempotent."""
        if self._closed:
            return
        self._closed = True
        if self._history_task and not self._history_task.done():
            self._history_task.cancel()
        for remove in self._unsubscribe:
            remove()
        self._unsubscribe = []
        await self.connection.disconnect()
        self.store.clear()
        self.presence.clear()
        self.pipeline.clear()
        self._selected = None

    async def __aenter__(self) -> "ChatSession":
        return await self.start()

    async def __aexit__(self, *_exc: object) -> None:
        await self.close()
