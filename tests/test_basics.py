"""Basic unit tests for the peerchat package."""

from datetime import datetime, timezone

from peerchat import (
    AsyncPeerChat,
    ChatSession,
    PeerChatError,
    AuthError,
    ConnectionError,
    HistoryError,
    SendError,
    ConnectionState,
    ConversationKey,
    Message,
    User,
    __version__,
)


def test_version():
    assert __version__ == "0.1.0"


def test_public_exports():
    assert AsyncPeerChat is not None
    assert ChatSession is not None


def test_error_hierarchy():
    for cls in (AuthError, ConnectionError, HistoryError, SendError):
        assert issubclass(cls, PeerChatError)


def test_error_attributes():
    err = PeerChatError(code="test_code", message="something broke")
    assert err.code == "test_code"
    assert str(err) == "something broke"
    assert err.details is None

    err_with_details = HistoryError("no history", details={"status": 500})
    assert err_with_details.code == "history_error"
    assert err_with_details.details == {"status": 500}


def test_connection_state_values():
    assert ConnectionState.CONNECTED == "connected"
    assert ConnectionState.DISCONNECTED == "disconnected"


def test_message_accepts_wire_aliases():
    msg = Message.model_validate({
        "_id": "m1", "sender": "u2", "receiver": "u1", "content": "hi",
        "fileUrl": "https://cdn/x.png", "timestamp": "2024-05-01T10:00:00Z",
    })
    assert msg.file_url == "https://cdn/x.png"
    assert msg.has_attachment
    assert msg.timestamp == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
    assert msg.correlation_id is None


def test_message_fills_missing_fields():
    msg = Message.model_validate({"sender": "u2", "receiver": "u1", "content": None, "fileUrl": None, "timestamp": None})
    assert msg.content == ""
    assert msg.file_url == ""
    assert msg.timestamp.tzinfo is not None
    assert not msg.has_attachment


def test_message_wire_format_drops_correlation_id():
    msg = Message(sender="u1", receiver="u2", content="ok", correlation_id="c-1",
                  timestamp=datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc))
    out = msg.to_wire()
    assert out["fileUrl"] == ""
    assert out["content"] == "ok"
    assert "correlation_id" not in out
    assert out["timestamp"].startswith("2024-05-01T10:00:00")


def test_message_time_label_is_hours_minutes():
    msg = Message(sender="u1", receiver="u2", timestamp=datetime(2024, 5, 1, 9, 5))
    assert msg.time_label() == "09:05"


def test_conversation_key_is_unordered():
    key = ConversationKey("u1", "u2")
    assert key == ConversationKey("u2", "u1")
    assert hash(key) == hash(ConversationKey("u2", "u1"))
    assert key.matches(Message(sender="u2", receiver="u1"))
    assert key.matches(Message(sender="u1", receiver="u2"))
    assert not key.matches(Message(sender="u1", receiver="u3"))
    assert not key.matches(Message(sender="u3", receiver="u2"))


def test_user_accepts_either_id_key():
    assert User.model_validate({"_id": "u1", "username": "a"}).id == "u1"
    assert User.model_validate({"id": "u1", "profile_photo": "p"}).profile_photo == "p"
    dumped = User(id="u1", username="a", profilePhoto="p").model_dump(by_alias=True)
    assert dumped["_id"] == "u1"
    assert dumped["profilePhoto"] == "p"
