"""Render adapter from conversation messages to display views.

Kept free of NiceGUI so it can be tested directly; ``chat_page`` maps
each view kind onto elements.
"""

from enum import Enum

from pydantic import BaseModel

from assistant_chat.conversation.state import Message
from assistant_chat.models.schemas import Role

THINKING_TEXT = "Thinking"
THINKING_INTERVAL = 0.35  # seconds between dot ticks
THINKING_MAX_DOTS = 3
NO_RESPONSE_TEXT = "No response received. Check the host and model, then try again."

# Extras understood by ui.markdown (markdown2)
MARKDOWN_EXTRAS = ["fenced-code-blocks", "tables", "code-friendly"]


class RenderKind(str, Enum):
    """How a message should be displayed."""

    PREFORMATTED = "preformatted"
    THINKING = "thinking"
    MARKDOWN = "markdown"
    NO_RESPONSE = "no_response"


class RenderView(BaseModel):
    """Display form of a single message.

    Attributes:
        kind: Which renderer to use.
        text: Text to hand to that renderer.
    """

    kind: RenderKind
    text: str


def render_view(message: Message, *, active: bool = False) -> RenderView:
    """Map a message to its display form.

    User text is shown verbatim. Assistant text goes to the markdown
    renderer untouched, except for placeholders: the live one animates,
    a stale one (failed or empty stream) shows a notice.

    Args:
        message: Conversation entry to render.
        active: Whether the message is the current stream target.

    Returns:
        The RenderView for the message.
    """
    if message.role == Role.USER:
        return RenderView(kind=RenderKind.PREFORMATTED, text=message.content)
    if message.awaiting_first_token:
        if active:
            return RenderView(kind=RenderKind.THINKING, text=thinking_label(0))
        return RenderView(kind=RenderKind.NO_RESPONSE, text=NO_RESPONSE_TEXT)
    return RenderView(kind=RenderKind.MARKDOWN, text=message.content)


def thinking_label(dots: int) -> str:
    return THINKING_TEXT + "." * dots


class ThinkingTicker:
    """Cycles 0..3 to animate the dots of the thinking indicator."""

    def __init__(self) -> None:
        self.count = 0

    def advance(self) -> str:
        """Move to the next tick and return the label to show."""
        self.count = (self.count + 1) % (THINKING_MAX_DOTS + 1)
        return self.label

    @property
    def label(self) -> str:
        return thinking_label(self.count)
