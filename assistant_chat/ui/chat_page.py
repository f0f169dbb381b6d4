"""NiceGUI chat interface with incremental NDJSON streaming."""

import uuid

from nicegui import ui
from pydantic import ValidationError

from assistant_chat.backend.config import ChatSettings, get_chat_settings
from assistant_chat.backend.session import stream_chat_response
from assistant_chat.conversation.state import ConversationState, Message
from assistant_chat.models.schemas import Role
from assistant_chat.ui.rendering import (
    MARKDOWN_EXTRAS,
    THINKING_INTERVAL,
    RenderKind,
    ThinkingTicker,
    render_view,
)

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #0a0a0a; color: #fafafa; min-height: 100vh; }

    .panel {
        background: #0a0a0a;
        border: 1px solid #262626;
        border-radius: 16px;
        overflow: hidden;
    }

    .header { border-bottom: 1px solid #262626; }

    .message-user {
        background: #171717;
        border: 1px solid #262626;
        border-radius: 16px;
    }

    .message-assistant {
        background: #0a0a0a;
        border: 1px solid #262626;
        border-radius: 16px;
    }

    .role-label { font-size: 11px; letter-spacing: 0.05em; color: #737373; }

    .input-box {
        background: #171717;
        border: 1px solid #404040;
        border-radius: 9999px;
        transition: border-color 0.2s;
    }
    .input-box:focus-within { border-color: #525252; }

    /* Markdown styling */
    .message-assistant strong { font-weight: 600; }
    .message-assistant pre {
        background: #171717; border-radius: 8px; padding: 0.75rem;
        margin: 0.5rem 0; overflow-x: auto;
    }
    .message-assistant code { font-family: 'Menlo', 'Monaco', monospace; font-size: 12px; }
    .message-assistant table { border-collapse: collapse; margin: 0.5rem 0; }
    .message-assistant th, .message-assistant td { border: 1px solid #404040; padding: 4px 8px; }
    .message-assistant a { color: #818cf8; text-decoration: underline; }
</style>
"""


class ChatSession:
    """Manages chat state for one browser tab."""

    def __init__(self, defaults: ChatSettings) -> None:
        self._defaults = defaults
        self.conversation = ConversationState(greet=True)
        self.session_id: str = str(uuid.uuid4())
        self.ollama_host: str = defaults.ollama_host
        self.model_name: str = defaults.model_name

    def resolve_settings(self) -> ChatSettings:
        """Apply the sidebar host/model on top of the defaults.

        Raises:
            ValidationError: If host or model is empty.
        """
        return ChatSettings.model_validate({
            **self._defaults.model_dump(),
            "ollama_host": self.ollama_host,
            "model_name": self.model_name,
        })

    def new_chat(self) -> bool:
        """Start a fresh conversation unless a reply is still streaming."""
        if self.conversation.is_streaming:
            return False
        self.conversation = ConversationState(greet=True)
        self.session_id = str(uuid.uuid4())
        return True


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    session = ChatSession(get_chat_settings())

    messages_container: ui.column
    scroll_area: ui.scroll_area
    input_field: ui.textarea
    send_btn: ui.button
    live_markdown: ui.markdown | None = None

    def render_body(message: Message, active: bool) -> ui.markdown | None:
        view = render_view(message, active=active)
        if view.kind == RenderKind.PREFORMATTED:
            ui.label(view.text).classes("text-sm leading-relaxed whitespace-pre-wrap break-words")
        elif view.kind == RenderKind.MARKDOWN:
            return ui.markdown(view.text, extras=MARKDOWN_EXTRAS).classes(
                "text-sm leading-relaxed"
            )
        elif view.kind == RenderKind.THINKING:
            ticker = ThinkingTicker()
            label = ui.label(ticker.label).classes("text-sm text-neutral-400 italic")
            ui.timer(THINKING_INTERVAL, lambda: label.set_text(ticker.advance()))
        else:
            ui.label(view.text).classes("text-sm text-neutral-500 italic")
        return None

    def render_message(message: Message, active: bool) -> ui.markdown | None:
        is_user = message.role == Role.USER
        bubble = "message-user" if is_user else "message-assistant"

        with ui.element("div").classes(f"w-full p-3 {bubble}"):
            with ui.row().classes("w-full justify-between items-center mb-1"):
                ui.label(message.role.value.upper()).classes("role-label")
                ui.label(message.time).classes("text-[10px] text-neutral-600")
            return render_body(message, active)

    def refresh_messages() -> None:
        nonlocal live_markdown
        conversation = session.conversation
        active = conversation.active_handle
        live_markdown = None

        messages_container.clear()
        with messages_container:
            for i, message in enumerate(conversation.messages):
                is_active = active is not None and active.index == i
                element = render_message(message, is_active)
                if is_active:
                    live_markdown = element
        scroll_area.scroll_to(percent=1.0)

    async def send_message() -> None:
        try:
            settings = session.resolve_settings()
        except ValidationError as e:
            ui.notify(f"Invalid settings: {e.errors()[0]['msg']}", type="warning")
            return

        conversation = session.conversation
        handle = conversation.send(input_field.value or "")
        if handle is None:
            return

        input_field.value = ""
        send_btn.disable()
        refresh_messages()

        def on_chunk(_: str) -> None:
            if live_markdown is None:
                # First token: swap the thinking indicator for a markdown view
                refresh_messages()
                return
            live_markdown.set_content(conversation.messages[handle.index].content)
            scroll_area.scroll_to(percent=1.0)

        def on_complete(_: Message) -> None:
            send_btn.enable()
            refresh_messages()

        def on_error(error: str) -> None:
            send_btn.enable()
            refresh_messages()
            ui.notify(error, type="negative")

        await stream_chat_response(
            conversation, handle, on_chunk, on_complete, on_error, settings=settings
        )

    def new_chat() -> None:
        if not session.new_chat():
            ui.notify("Wait for the current reply to finish", type="info")
            return
        refresh_messages()

    # === UI Layout ===
    with ui.element("div").classes("w-full min-h-screen"):
        # Header
        with ui.row().classes("w-full header px-6 py-4 items-center justify-between"):
            with ui.column().classes("gap-0"):
                ui.label("The Assistant").classes("text-xl font-semibold")
                ui.label("I'm Ready to Help You").classes("text-sm text-neutral-400")
            with ui.row().classes("items-center gap-3"):
                ui.label().bind_text_from(
                    session, "session_id", lambda s: s[:8].upper()
                ).classes("text-xs text-neutral-500 font-mono")
                ui.button(icon="add", on_click=new_chat).props("flat round color=white")

        with ui.row().classes("w-full max-w-5xl mx-auto p-4 gap-4 no-wrap items-stretch").style(
            "height: calc(100vh - 6rem)"
        ):
            # Settings
            with ui.column().classes("panel p-3 w-64 gap-3 gt-sm"):
                ui.label("Settings").classes("font-medium")
                ui.input("Ollama Host").bind_value(session, "ollama_host").classes("w-full")
                ui.label("Set your Ollama host URL (e.g., http://localhost:11434).").classes(
                    "text-xs text-neutral-500"
                )
                ui.input("Model").bind_value(session, "model_name").classes("w-full")
                ui.label("Use a tag like the-assistant-gemma3-4b:latest.").classes(
                    "text-xs text-neutral-500"
                )

            # Messages + input
            with ui.column().classes("panel flex-grow h-full gap-0"):
                with ui.scroll_area().classes("flex-grow w-full") as scroll_area:
                    messages_container = ui.column().classes("w-full p-4 gap-3")

                with ui.row().classes("w-full p-3 items-center gap-2 border-t border-neutral-800"):
                    with ui.element("div").classes("flex-grow input-box px-3"):
                        input_field = (
                            ui.textarea(placeholder="Ask anything")
                            .props("autogrow borderless dense dark rows=1")
                            .classes("w-full")
                            .on("keydown.enter.exact.prevent", send_message)
                        )
                    send_btn = ui.button(icon="send", on_click=send_message).props(
                        "round flat color=white"
                    )

    refresh_messages()


def main() -> None:
    ui.run(title="The Assistant", port=8080, reload=False, dark=True)


if __name__ == "__main__":
    main()
