"""Conversation log and active stream tracking for one chat session.

The log is append-only and is mutated exclusively through ``send``,
``apply_delta``, ``end_stream`` and ``abort_stream``. All four run
synchronously on the event loop, so no locking is needed.
"""

import itertools
import logging
from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from assistant_chat.conversation.normalizer import normalize
from assistant_chat.models.schemas import Role, WireMessage

logger = logging.getLogger(__name__)

PLACEHOLDER = "Thinking…"


class EmptyInputError(ValueError):
    """Raised when a send is attempted with no text or during a stream."""

    pass


def _time_label() -> str:
    return datetime.now().strftime("%I:%M %p")


def greeting(now: datetime | None = None) -> str:
    """Return a time-of-day greeting for the start of a session."""
    hour = (now or datetime.now()).hour
    if hour < 12:
        period = "morning"
    elif hour < 18:
        period = "afternoon"
    else:
        period = "evening"
    return f"Good {period}! How can I help you today?"


class Message(BaseModel):
    """A single entry in the conversation log.

    Messages are frozen; streaming updates replace the entry with a copy.

    Attributes:
        role: Who wrote the message.
        content: Message text. Holds the placeholder text until the
                 first token of a reply arrives.
        awaiting_first_token: True for a reply placeholder with no content yet.
        time: Display timestamp.
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
    awaiting_first_token: bool = False
    time: str = Field(default_factory=_time_label)

    @classmethod
    def placeholder(cls) -> "Message":
        """Create an assistant reply placeholder."""
        return cls(role=Role.ASSISTANT, content=PLACEHOLDER, awaiting_first_token=True)

    def to_wire(self) -> WireMessage:
        return WireMessage(role=self.role, content=self.content)


class StreamHandle(BaseModel):
    """Identifies the message currently receiving deltas.

    Attributes:
        stream_id: Unique per stream within a session.
        index: Position of the target message in the log.
    """

    model_config = ConfigDict(frozen=True)

    stream_id: int
    index: int


class ConversationState:
    """Ordered message log plus the handle of the in-flight reply."""

    def __init__(self, messages: Iterable[Message] = (), *, greet: bool = False) -> None:
        """Initialize the conversation.

        Args:
            messages: Optional initial log.
            greet: Seed an empty log with an assistant greeting.
        """
        self._messages: list[Message] = list(messages)
        if greet and not self._messages:
            self._messages.append(Message(role=Role.ASSISTANT, content=greeting()))
        self._active: StreamHandle | None = None
        self._stream_ids = itertools.count(1)

    @property
    def messages(self) -> tuple[Message, ...]:
        """Snapshot of the log in insertion order."""
        return tuple(self._messages)

    @property
    def is_streaming(self) -> bool:
        return self._active is not None

    @property
    def active_handle(self) -> StreamHandle | None:
        return self._active

    def __len__(self) -> int:
        return len(self._messages)

    def _check_input(self, user_text: str) -> str:
        """Validate a prompt before it is appended.

        Returns:
            The stripped prompt.

        Raises:
            EmptyInputError: If the prompt is blank or a stream is active.
        """
        if self.is_streaming:
            raise EmptyInputError("A reply is still streaming")
        text = user_text.strip() if user_text else ""
        if not text:
            raise EmptyInputError("Prompt is empty")
        return text

    def _resolve(self, handle: StreamHandle | None) -> StreamHandle | None:
        """Return the active handle if ``handle`` (when given) still matches it."""
        if self._active is None:
            return None
        if handle is not None and handle != self._active:
            return None
        return self._active

    def send(self, user_text: str) -> StreamHandle | None:
        """Append a user message and its reply placeholder.

        Both messages land in a single update, and the placeholder
        becomes the new stream target.

        Args:
            user_text: Raw prompt from the input box.

        Returns:
            Handle of the new stream, or None if the send was rejected.
        """
        try:
            text = self._check_input(user_text)
        except EmptyInputError as e:
            logger.debug(f"Ignoring send: {e}")
            return None

        handle = StreamHandle(stream_id=next(self._stream_ids), index=len(self._messages) + 1)
        self._messages = [
            *self._messages,
            Message(role=Role.USER, content=text),
            Message.placeholder(),
        ]
        self._active = handle
        return handle

    def apply_delta(self, fragment: str, handle: StreamHandle | None = None) -> bool:
        """Append a streamed fragment to the in-flight reply.

        The first fragment replaces the placeholder; later ones are
        concatenated. Deltas without a matching active stream are dropped.

        Args:
            fragment: Text delta from the backend.
            handle: Stream the delta belongs to. Defaults to the active one.

        Returns:
            Whether the delta was applied.
        """
        target = self._resolve(handle)
        if target is None:
            logger.debug("Dropping delta for inactive stream")
            return False
        if not fragment:
            return False

        message = self._messages[target.index]
        content = fragment if message.awaiting_first_token else message.content + fragment
        self._messages[target.index] = message.model_copy(
            update={"content": content, "awaiting_first_token": False}
        )
        return True

    def end_stream(self, handle: StreamHandle | None = None) -> Message | None:
        """Finish the active stream.

        Normalizes the reply, writes it back, then clears the handle.
        A reply that never received a token keeps its placeholder state.

        Returns:
            The finalized message, or None if there was no matching stream.
        """
        target = self._resolve(handle)
        if target is None:
            return None

        message = self._messages[target.index]
        if not message.awaiting_first_token:
            message = message.model_copy(update={"content": normalize(message.content)})
            self._messages[target.index] = message
        self._active = None
        return message

    def abort_stream(self, handle: StreamHandle | None = None) -> bool:
        """Stop the active stream without normalizing.

        Used after a failed request; the placeholder stays so the user
        can resend.

        Returns:
            Whether a matching stream was aborted.
        """
        target = self._resolve(handle)
        if target is None:
            return False
        self._active = None
        return True

    def history(self) -> list[WireMessage]:
        """Prompt history to send to the backend.

        Excludes the in-flight reply and placeholders that never
        received any content.
        """
        active_index = self._active.index if self._active else None
        return [
            message.to_wire()
            for i, message in enumerate(self._messages)
            if i != active_index and not message.awaiting_first_token
        ]
