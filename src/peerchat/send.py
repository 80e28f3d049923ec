"""
Send pipeline: picks the delivery path for an outgoing message and folds
the result into the conversation store.

- text only:   live `send-message` push + immediate local echo. The echo is
               kept whether or not the push is delivered.
- attachment:  multipart POST /messages/send (file, receiver, content); the
               persisted message in the response is appended once it
               arrives. Failures notify and append nothing.

Pending input is cleared after either path, success or failure.
"""

import logging
import uuid
from pathlib import Path
from typing import Callable, Optional, Union

from pydantic import ValidationError

from peerchat.conversation import ConversationStore
from peerchat.errors import SendError
from peerchat.models.message import Message
from peerchat.models.state import Notice
from peerchat.transport.http import HttpClient
from peerchat.transport.socketio import ConnectionManager

logger = logging.getLogger(__name__)

Notifier = Callable[[Notice], None]
Attachment = Union[str, Path]


class SendPipeline:
    def __init__(
        self,
        local_user_id: str,
        connection: ConnectionManager,
        store: ConversationStore,
        http: HttpClient,
        notify: Notifier,
    ):
        self._local_user_id = local_user_id
        self._connection = connection
        self._store = store
        self._http = http
        self._notify = notify
        self.pending_text = ""
        self.pending_attachment: Optional[Path] = None
        self._sending = False

    @property
    def sending(self) -> bool:
        """True while an attachment upload is in flight."""
        return self._sending

    def stage(self, text: Optional[str] = None, attachment: Optional[Attachment] = None) -> None:
        """Set the pending input, as typed / picked by the operator."""
        if text is not None:
            self.pending_text = text
        if attachment is not None:
            self.pending_attachment = Path(attachment)

    def clear(self) -> None:
        self.pending_text = ""
        self.pending_attachment = None
        self._sending = False

    async def submit(
        self,
        receiver: str,
        text: Optional[str] = None,
        attachment: Optional[Attachment] = None,
    ) -> Optional[Message]:
        """Send to `receiver`. Falls back to the pending input for omitted arguments.

        Returns the appended message, or None when nothing was sent.
        """
        content = self.pending_text if text is None else text
        file_path = self.pending_attachment if attachment is None else Path(attachment)
        if not content and not file_path:
            return None

        try:
            if file_path:
                self._sending = True
                try:
                    message = await self._upload(receiver, content, file_path)
                except SendError as e:
                    logger.warning("Attachment send to %s failed: %s", receiver, e)
                    self._notify(Notice(level="error", text="Failed to send message"))
                    return None
                self._store.append(message)
                return message
            return self._send_text(receiver, content)
        finally:
            self.clear()

    def _send_text(self, receiver: str, content: str) -> Message:
        message = Message(
            sender=self._local_user_id,
            receiver=receiver,
            content=content,
            file_url="",
            correlation_id=str(uuid.uuid4()),
        )
        self._connection.send_live_message(message)
        self._store.append(message)
        return message

    async def _upload(self, receiver: str, content: str, file_path: Path) -> Message:
        try:
            data = await self._http.post_multipart(
                "/messages/send",
                fields={"receiver": receiver, "content": content},
                files={"file": file_path},
            )
        except Exception as e:
            raise SendError(f"Failed to upload {file_path.name}: {e}") from e
        try:
            return Message.model_validate(data)
        except ValidationError as e:
            raise SendError(f"Malformed send response: {e}") from e
