"""
History loader: one-shot fetch of a conversation's persisted messages.
"""

from pydantic import ValidationError

from peerchat.errors import HistoryError, PeerChatError
from peerchat.models.message import Message
from peerchat.transport.http import HttpClient


class HistoryLoader:
    def __init__(self, http: HttpClient):
        self._http = http

    async def fetch_history(self, peer_user_id: str) -> list[Message]:
        """GET /messages/history/{peer}. Messages come back in server order."""
        try:
            data = await self._http.get(f"/messages/history/{peer_user_id}")
        except PeerChatError as e:
            raise HistoryError(f"Failed to load history for {peer_user_id}: {e}", details=e.details) from e
        except Exception as e:
            raise HistoryError(f"Failed to load history for {peer_user_id}: {e}") from e
        if not isinstance(data, list):
            raise HistoryError(f"Unexpected history payload for {peer_user_id}: {type(data).__name__}")
        try:
            return [Message.model_validate(item) for item in data]
        except ValidationError as e:
            raise HistoryError(f"Malformed history for {peer_user_id}: {e}") from e
