"""
peerchat error types.
"""

from typing import Any, Optional


class PeerChatError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class AuthError(PeerChatError):
    def __init__(self, message: str, code: str = "auth_error"):
        super().__init__(code, message)


class ConnectionError(PeerChatError):
    def __init__(self, message: str):
        super().__init__("connection_error", message)


class HistoryError(PeerChatError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("history_error", message, details)


class SendError(PeerChatError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("send_error", message, details)
