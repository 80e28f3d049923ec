"""
Conversation store: the session-wide timeline and its per-peer views.

Every message (history, inbound live event, local echo) lands in one list in
arrival order. Timestamps are labels only: a message delivered late but
stamped earlier still sorts after everything delivered before it.

Views are filtered on every read by the unordered {local, peer} pair;
messages for other conversations stay in the timeline.

History loads are bracketed by `begin_load` / `replace_history`. The fetched
messages replace the peer's messages that were stored before the load began
and sit ahead of anything appended while the fetch was in flight, so a live
event that beats the history response is not lost.
"""

from typing import Iterable, Optional

from peerchat.models.message import ConversationKey, Message


class ConversationStore:
    def __init__(self, local_user_id: str):
        self._local_user_id = local_user_id
        self._timeline: list[Message] = []
        self._active_peer: Optional[str] = None
        self._loading = False
        self._load_mark: Optional[int] = None

    @property
    def local_user_id(self) -> str:
        return self._local_user_id

    @property
    def active_peer(self) -> Optional[str]:
        return self._active_peer

    @property
    def loading(self) -> bool:
        return self._loading

    def __len__(self) -> int:
        return len(self._timeline)

    def append(self, message: Message) -> None:
        self._timeline.append(message)

    def begin_load(self, peer_user_id: str) -> None:
        """Select `peer_user_id` and enter the loading state."""
        self._active_peer = peer_user_id
        self._loading = True
        self._load_mark = len(self._timeline)

    def finish_load(self, peer_user_id: str) -> None:
        """Leave the loading state without content (failed fetch)."""
        if peer_user_id == self._active_peer:
            self._loading = False
            self._load_mark = None

    def replace_history(self, peer_user_id: str, messages: Iterable[Message]) -> None:
        """Install fetched history for `peer_user_id`, in the order received."""
        if peer_user_id == self._active_peer and self._load_mark is not None:
            mark = self._load_mark
        else:
            mark = len(self._timeline)
        key = ConversationKey(self._local_user_id, peer_user_id)
        kept = [m for m in self._timeline[:mark] if not key.matches(m)]
        self._timeline = kept + list(messages) + self._timeline[mark:]
        self.finish_load(peer_user_id)

    def view_for(self, peer_user_id: str) -> list[Message]:
        key = ConversationKey(self._local_user_id, peer_user_id)
        return [m for m in self._timeline if key.matches(m)]

    def clear(self) -> None:
        self._timeline = []
        self._active_peer = None
        self._loading = False
        self._load_mark = None
