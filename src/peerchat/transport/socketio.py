"""
Socket.IO connection manager: the session's single live transport.

Connection: {base_url} on the default socket.io path. After connecting the
local user is announced with `user-online`. Inbound events:

- `online-users`     full replacement list of online user ids
- `receive-message`  one message

Outbound `send-message` is fire-and-forget: no ack, no retry, no replay.
Reconnection after transient drops is left to socketio.AsyncClient.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

import socketio
from pydantic import ValidationError

from peerchat.errors import ConnectionError
from peerchat.models.message import Message
from peerchat.models.state import ConnectionState

logger = logging.getLogger(__name__)

EVENT_USER_ONLINE = "user-online"
EVENT_ONLINE_USERS = "online-users"
EVENT_RECEIVE_MESSAGE = "receive-message"
EVENT_SEND_MESSAGE = "send-message"

PresenceCallback = Callable[[frozenset[str]], None]
MessageCallback = Callable[[Message], None]


def _remover(handlers: list[Any], handler: Any) -> Callable[[], None]:
    def remove() -> None:
        try:
            handlers.remove(handler)
        except ValueError:
            pass
    return remove


class ConnectionManager:
    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        transports: Optional[list[str]] = None,
    ):
        self._base_url = base_url
        self._token = token
        self._transports = transports
        self._sio: Optional[socketio.AsyncClient] = None
        self._state = ConnectionState.DISCONNECTED
        self._presence_handlers: list[PresenceCallback] = []
        self._message_handlers: list[MessageCallback] = []
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED and self._sio is not None and self._sio.connected

    @property
    def state(self) -> ConnectionState:
        return ConnectionState.CONNECTED if self.connected else ConnectionState.DISCONNECTED

    def on_presence_snapshot(self, callback: PresenceCallback) -> Callable[[], None]:
        """Subscribe to presence snapshots. Returns a cleanup function."""
        self._presence_handlers.append(callback)
        return _remover(self._presence_handlers, callback)

    def on_inbound_message(self, callback: MessageCallback) -> Callable[[], None]:
        """Subscribe to inbound messages, delivered in arrival order. Returns a cleanup function."""
        self._message_handlers.append(callback)
        return _remover(self._message_handlers, callback)

    async def connect(self, local_user_id: str) -> "ConnectionManager":
        """Open the transport and announce `local_user_id` as online."""
        if self._sio and self._sio.connected:
            return self
        if self._sio:
            # a dropped client keeps reconnecting on its own; stop it first
            stale, self._sio = self._sio, None
            await stale.disconnect()

        self._sio = socketio.AsyncClient()

        @self._sio.event
        async def connect() -> None:
            self._state = ConnectionState.CONNECTED

        @self._sio.event
        async def disconnect(_reason: str = "") -> None:
            self._state = ConnectionState.DISCONNECTED

        @self._sio.on(EVENT_ONLINE_USERS)
        async def on_online_users(data: Any) -> None:
            self._dispatch_presence(data)

        @self._sio.on(EVENT_RECEIVE_MESSAGE)
        async def on_receive_message(data: Any) -> None:
            self._dispatch_message(data)

        try:
            await self._sio.connect(
                self._base_url,
                auth={"token": self._token} if self._token else None,
                transports=self._transports,
            )
        except (socketio.exceptions.ConnectionError, OSError) as e:
            self._sio = None
            self._state = ConnectionState.DISCONNECTED
            raise ConnectionError(f"Failed to connect to {self._base_url}: {e}") from e

        self._state = ConnectionState.CONNECTED
        await self._sio.emit(EVENT_USER_ONLINE, local_user_id)
        logger.info("Connected to %s as %s", self._base_url, local_user_id)
        return self

    def _dispatch_presence(self, data: Any) -> None:
        if not isinstance(data, (list, tuple, set, frozenset)):
            logger.warning("Ignoring malformed %s payload: %r", EVENT_ONLINE_USERS, data)
            return
        snapshot = frozenset(str(uid) for uid in data)
        for handler in list(self._presence_handlers):
            handler(snapshot)

    def _dispatch_message(self, data: Any) -> None:
        try:
            message = Message.model_validate(data)
        except ValidationError as e:
            logger.warning("Ignoring malformed %s payload: %s", EVENT_RECEIVE_MESSAGE, e)
            return
        for handler in list(self._message_handlers):
            handler(message)

    def send_live_message(self, message: Message) -> None:
        """Push a message to the transport. At-most-once and unconfirmed.

        Never raises: when disconnected the push is dropped, and emit errors
        are logged. Callers reflect the message locally themselves.
        """
        if not self.connected:
            logger.warning("Dropping live message to %s: transport disconnected", message.receiver)
            return
        sio = self._sio
        payload = message.to_wire()

        async def _do_emit() -> None:
            try:
                await sio.emit(EVENT_SEND_MESSAGE, payload)  # type: ignore[union-attr]
            except Exception as e:
                logger.error(f"Emit failed for {EVENT_SEND_MESSAGE}: {e}")

        task = asyncio.get_running_loop().create_task(_do_emit())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def disconnect(self) -> None:
        """Tear down the transport. Safe to call when already disconnected."""
        self._state = ConnectionState.DISCONNECTED
        if self._sio:
            sio, self._sio = self._sio, None
            await sio.disconnect()
            logger.info("Disconnected from %s", self._base_url)
