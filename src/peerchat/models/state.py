"""
Session-facing state types: connection state and transient notices.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class Notice(BaseModel):
    """Transient, non-fatal notification for the UI collaborator."""
    level: Literal["info", "success", "error"] = "info"
    text: str
