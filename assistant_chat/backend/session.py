"""Drive one streamed reply into a conversation.

Connects the backend client to ConversationState and reports progress
through callbacks, so the UI layer only has to redraw.
"""

import asyncio
import logging
from collections.abc import Callable
from contextlib import aclosing

from assistant_chat.backend.client import OllamaChatClient, get_chat_client
from assistant_chat.backend.config import ChatSettings
from assistant_chat.conversation.state import ConversationState, Message, StreamHandle
from assistant_chat.streaming import StreamConnectionError

logger = logging.getLogger(__name__)


async def stream_chat_response(
    state: ConversationState,
    handle: StreamHandle,
    on_chunk: Callable[[str], None],
    on_complete: Callable[[Message], None],
    on_error: Callable[[str], None],
    *,
    client: OllamaChatClient | None = None,
    settings: ChatSettings | None = None,
) -> None:
    """Stream the reply for the turn started by ``state.send``.

    Deltas are applied in arrival order. A failed request aborts the
    stream and leaves the placeholder in place; cancellation (e.g. the
    page closing) finalizes whatever arrived.

    Args:
        state: Conversation holding the in-flight reply.
        handle: Handle returned by ``state.send``.
        on_chunk: Called with each applied delta.
        on_complete: Called with the finalized reply.
        on_error: Called with a human-readable error message.
        client: Chat client to use. Defaults to the global one.
        settings: Per-session override of host/model.
    """
    chat_client = client or get_chat_client()
    history = state.history()
    applied = 0

    try:
        async with aclosing(chat_client.stream_chat(history, settings)) as deltas:
            async for delta in deltas:
                if not state.apply_delta(delta, handle):
                    logger.debug(f"Stream {handle.stream_id} superseded, stopping")
                    break
                applied += 1
                on_chunk(delta)
    except StreamConnectionError as e:
        logger.warning(f"Chat request failed: {e}")
        state.abort_stream(handle)
        on_error(str(e))
        return
    except asyncio.CancelledError:
        state.end_stream(handle)
        raise

    message = state.end_stream(handle)
    if message is None:
        return

    logger.info(
        f"Stream {handle.stream_id} finished: {applied} deltas, {len(message.content)} chars"
    )
    on_complete(message)
