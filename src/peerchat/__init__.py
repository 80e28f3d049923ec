"""
peerchat: two-party real-time messaging client for Python.

Socket.IO + REST client: roster, presence, conversation history and live
messages merged into one ordered timeline per session.
"""

from peerchat.client import AsyncPeerChat
from peerchat.auth import Auth
from peerchat.session import ChatSession
from peerchat.errors import PeerChatError, AuthError, ConnectionError, HistoryError, SendError
from peerchat.models import AuthState, ConnectionState, ConversationKey, Message, Notice, User

__version__ = "0.1.0"
__all__ = [
    "AsyncPeerChat",
    "Auth",
    "ChatSession",
    "PeerChatError",
    "AuthError",
    "ConnectionError",
    "HistoryError",
    "SendError",
    "AuthState",
    "ConnectionState",
    "ConversationKey",
    "Message",
    "Notice",
    "User",
]
