"""
Message models: what the history endpoint, the upload endpoint and the
`receive-message` / `send-message` socket events carry.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Message(BaseModel):
    """One chat message. Identity is positional; there is no server id.

    `correlation_id` is set only on locally originated sends and never leaves
    the process (excluded from serialization).
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    sender: str
    receiver: str
    content: str = ""
    file_url: str = Field(default="", alias="fileUrl")
    timestamp: datetime = Field(default_factory=_now)
    correlation_id: Optional[str] = Field(default=None, exclude=True)

    @field_validator("content", "file_url", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("timestamp", mode="before")
    @classmethod
    def _default_timestamp(cls, value: Any) -> Any:
        # Server copies may carry an explicit null.
        return _now() if value in (None, "") else value

    @property
    def has_attachment(self) -> bool:
        return bool(self.file_url)

    def belongs_to(self, user_a: str, user_b: str) -> bool:
        """True if (sender, receiver) equals {user_a, user_b} in either order."""
        return (self.sender == user_a and self.receiver == user_b) or (
            self.sender == user_b and self.receiver == user_a
        )

    def time_label(self) -> str:
        return self.timestamp.astimezone().strftime("%H:%M")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ConversationKey:
    """Unordered {local, peer} pair used to filter the shared timeline."""

    __slots__ = ("local", "peer")

    def __init__(self, local: str, peer: str):
        self.local = local
        self.peer = peer

    def matches(self, message: Message) -> bool:
        return message.belongs_to(self.local, self.peer)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConversationKey):
            return NotImplemented
        return frozenset((self.local, self.peer)) == frozenset((other.local, other.peer))

    def __hash__(self) -> int:
        return hash(frozenset((self.local, self.peer)))

    def __repr__(self) -> str:
        return f"ConversationKey(local={self.local!r}, peer={self.peer!r})"
