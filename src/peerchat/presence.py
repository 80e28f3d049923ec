"""
Presence tracker: the latest `online-users` snapshot, nothing more.
"""

from typing import Iterable


class PresenceTracker:
    def __init__(self) -> None:
        self._online: frozenset[str] = frozenset()

    @property
    def online(self) -> frozenset[str]:
        return self._online

    def update(self, snapshot: Iterable[str]) -> None:
        """Replace the tracked set. Snapshots are never merged."""
        self._online = frozenset(snapshot)

    def is_online(self, user_id: str) -> bool:
        return user_id in self._online

    def clear(self) -> None:
        self._online = frozenset()
