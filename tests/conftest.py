"""Shared fakes: a stand-in socket.io client and an httpx mock backend."""

import json
from typing import Any, Callable, Optional

import httpx
import pytest
import socketio

from peerchat.models.user import AuthState
from peerchat.transport.http import HttpClient

LOCAL = {"_id": "u1", "username": "alice", "email": "alice@example.com", "profilePhoto": None}
PEERS = [
    {"_id": "u2", "username": "bob", "email": "bob@example.com", "profilePhoto": "https://cdn/bob.png"},
    {"_id": "u3", "username": "carol", "email": "carol@example.com"},
]


class FakeSocket:
    """Records handlers and emits the way socketio.AsyncClient is used."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.handlers: dict[str, Callable[..., Any]] = {}
        self.emitted: list[tuple[str, Any]] = []
        self.connected = False
        self.url: Optional[str] = None
        self.connect_kwargs: dict[str, Any] = {}
        self.disconnect_calls = 0

    def event(self, fn):
        self.handlers[fn.__name__] = fn
        return fn

    def on(self, name, handler=None):
        def decorator(fn):
            self.handlers[name] = fn
            return fn
        return decorator

    async def connect(self, url, **kwargs):
        if self.fail:
            raise socketio.exceptions.ConnectionError("Connection refused")
        self.url = url
        self.connect_kwargs = kwargs
        self.connected = True
        await self.handlers["connect"]()

    async def emit(self, event, data=None):
        self.emitted.append((event, data))

    async def disconnect(self):
        self.disconnect_calls += 1
        if self.connected:
            self.connected = False
            await self.handlers["disconnect"]()

    async def push(self, event, data):
        """Deliver a server event."""
        await self.handlers[event](data)

    async def drop(self):
        """Simulate a transport-level drop."""
        self.connected = False
        await self.handlers["disconnect"]("transport close")

    def emitted_of(self, event):
        return [data for name, data in self.emitted if name == event]


class SocketFactory:
    def __init__(self):
        self.instances: list[FakeSocket] = []
        self.fail = False

    def __call__(self, *args, **kwargs) -> FakeSocket:
        sock = FakeSocket(fail=self.fail)
        self.instances.append(sock)
        return sock

    @property
    def last(self) -> FakeSocket:
        return self.instances[-1]


@pytest.fixture
def sockets(monkeypatch) -> SocketFactory:
    factory = SocketFactory()
    monkeypatch.setattr(socketio, "AsyncClient", factory)
    return factory


class FakeBackend:
    """Route table for httpx.MockTransport. Handlers may be sync or async."""

    def __init__(self):
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], Any]] = {}
        self.requests: list[httpx.Request] = []

    def route(self, method: str, path: str, handler: Callable[[httpx.Request], Any]) -> None:
        self.routes[(method, path)] = handler

    def json(self, method: str, path: str, body: Any, status: int = 200) -> None:
        self.route(method, path, lambda request: httpx.Response(status, json=body))

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"msg": "Not found"})
        result = handler(request)
        if hasattr(result, "__await__"):
            result = await result
        return result


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def http(backend) -> HttpClient:
    return HttpClient(base_url="http://chat.test", token="tok-1", transport=httpx.MockTransport(backend))


@pytest.fixture
def auth_state() -> AuthState:
    return AuthState.model_validate({"token": "tok-1", "user": LOCAL})


def wire(sender: str, receiver: str, content: str = "", ts: str = "2024-05-01T10:00:00Z", file_url: str = "") -> dict:
    return {"sender": sender, "receiver": receiver, "content": content, "fileUrl": file_url, "timestamp": ts}


def body(request: httpx.Request) -> Any:
    return json.loads(request.content)
