from peerchat.models.message import ConversationKey, Message
from peerchat.models.state import ConnectionState, Notice
from peerchat.models.user import AuthState, User

__all__ = ["AuthState", "ConnectionState", "ConversationKey", "Message", "Notice", "User"]
