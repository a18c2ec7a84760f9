"""Textual TUI for MockingBird."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from rich.console import Group as RichGroup
from rich.markup import escape as markup_escape
from rich.text import Text as RichText
from textual import events, on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Footer, Static

from .editor import EditorPane
from .focus import FocusArea
from .session import Key, KeyEvent, SessionController, SessionPhase
from .timer import format_time

if TYPE_CHECKING:
    from .chat import ChatViewport
    from .client import InterviewerClient
    from .config import InterviewConfig

logger = logging.getLogger(__name__)

# Textual key names that map directly onto session keys
KEY_MAP = {
    "up": Key.UP,
    "down": Key.DOWN,
    "left": Key.LEFT,
    "right": Key.RIGHT,
    "pageup": Key.PAGE_UP,
    "pagedown": Key.PAGE_DOWN,
    "backspace": Key.BACKSPACE,
    "delete": Key.DELETE,
    "enter": Key.ENTER,
    "ctrl+enter": Key.SUBMIT,
}


WELCOME = (
    "You will get a random coding question and a countdown. Write your solution in the code pane "
    "and talk the interviewer through your thinking in the chat. When time runs out the "
    "interviewer writes feedback on the whole conversation."
)


CSS = """
Screen {
    layout: vertical;
}

#workspace {
    height: 1fr;
}

#workspace.hidden, #welcome.hidden, #feedback.hidden {
    display: none;
}

#top-row {
    height: auto;
}

#footer {
    dock: bottom;
    height: 1;
}
"""


def render_editor(pane: EditorPane, active: bool, placeholder: str = "") -> RichText:
    """Render an editor pane's visible lines, drawing the cursor when active."""
    text = RichText()
    buffer = pane.buffer
    if pane.lines_above:
        text.append(f"↑ Scroll up ({pane.lines_above} lines above)\n", style="dim")
    visible = pane.visible_lines()
    for i, (row, line) in enumerate(visible):
        if active and row == buffer.row:
            text.append(line[:buffer.col])
            under = line[buffer.col:buffer.col + 1] or " "
            text.append(under, style="reverse")
            text.append(line[buffer.col + 1:])
        elif not line and row == 0 and not active and placeholder and len(buffer.lines) == 1:
            text.append(placeholder, style="dim")
        else:
            text.append(line or " ")
        if i < len(visible) - 1:
            text.append("\n")
    for _ in range(pane.height - len(visible)):
        text.append("\n ")
    if pane.lines_below:
        text.append(f"\n↓ Scroll down ({pane.lines_below} lines below)", style="dim")
    return text


def render_scroll_indicator(chat: ChatViewport, scroll_focused: bool) -> str | None:
    """Markup for the chat history scroll hint, or None when everything fits."""
    if not chat.has_overflow:
        return None
    parts = []
    if chat.messages_above:
        parts.append(f"↑ Scroll up ({chat.messages_above} messages above)")
    if chat.messages_below:
        parts.append(f"↓ Scroll down ({chat.messages_below} messages below)")
    prefix = "\\[SCROLL MODE] " if scroll_focused else ""
    color = "yellow" if scroll_focused else "dim"
    return f"[{color}]{prefix}{' | '.join(parts)}[/{color}]"


class HeaderPanel(Static):
    """Greeting, phase and remaining time."""

    DEFAULT_CSS = """
    HeaderPanel {
        height: auto;
        border: round $success;
        padding: 0 1;
    }
    """

    def update_header(self, username: str, controller: SessionController) -> None:
        name = markup_escape(username) if username else "there"
        phase = controller.phase
        if phase is SessionPhase.IDLE:
            hint = "Press 's' to start an interview. Press 'q' to quit."
        elif phase is SessionPhase.ACTIVE:
            hint = "Ctrl+W: navigation mode  Ctrl+X: end interview"
        elif phase is SessionPhase.ENDED_GENERATING:
            hint = "Time's up! Generating feedback..."
        else:
            hint = "Press 'q' or 'Enter' to return to start"
        time_text = ""
        if phase is SessionPhase.ACTIVE:
            time_text = f"  [bold]Time: {format_time(controller.timer.remaining_seconds)}[/bold]"
        content = (
            f"Hello, [green]{name}[/green], Welcome to MockingBird!{time_text}\n"
            f"[dim]{hint}[/dim]"
        )
        self.update(RichText.from_markup(content))


class QuestionPanel(Static):
    """Current question, difficulty and navigation-mode indicator."""

    DEFAULT_CSS = """
    QuestionPanel {
        width: 25%;
        height: auto;
        min-height: 10;
        border: round $success;
        padding: 0 1;
    }
    """

    def update_question(self, controller: SessionController) -> None:
        question = controller.question
        parts = []
        if question:
            parts.append(RichText(question.description))
            parts.append(RichText(f"\nDifficulty: {question.difficulty}", style="cyan"))
        else:
            parts.append(RichText("Loading question...", style="dim"))
        if controller.focus.navigation_mode:
            parts.append(RichText(
                f"\nNav: {controller.focus.focus.value} | Press Ctrl+W to exit", style="yellow",
            ))
        self.update(RichGroup(*parts))


class CodePanel(Static):
    """Code editor pane."""

    DEFAULT_CSS = """
    CodePanel {
        width: 75%;
        height: auto;
        border: round $success;
        padding: 0 1;
    }

    CodePanel.pane-focused {
        border: round $warning;
    }
    """

    def update_code(self, controller: SessionController) -> None:
        active = controller.focus.is_active(FocusArea.CODE)
        self.set_class(active, "pane-focused")
        body = render_editor(controller.code, active)
        hint = RichText(
            "Tab: indent • Shift+Tab: unindent • Ctrl+S: submit code • Ctrl+W: navigation mode",
            style="dim",
        )
        parts = [body, hint]
        if controller.submitted_code:
            parts.append(RichText("Code submitted ✓", style="green"))
        self.update(RichGroup(*parts))


class ChatPanel(Static):
    """Chat history window and message input."""

    DEFAULT_CSS = """
    ChatPanel {
        height: 1fr;
        border: round $success;
        padding: 0 1;
    }

    ChatPanel.pane-focused {
        border: round $warning;
    }
    """

    PLACEHOLDER = "Type a message... (Enter for new line, Ctrl+S or Enter on empty line to send)"

    def update_chat(self, controller: SessionController) -> None:
        chat = controller.chat
        chat_active = controller.focus.is_active(FocusArea.CHAT)
        scroll_focused = controller.focus.focus is FocusArea.SCROLL
        self.set_class(chat_active, "pane-focused")

        parts = []
        visible = chat.visible_messages()
        if not visible:
            parts.append(RichText("No messages yet. Start a conversation!", style="dim"))
        for message in visible:
            if message.role == "user":
                label = RichText("👤 You:", style="bold cyan")
                body = RichText(f"  {message.content}")
            else:
                label = RichText("🤖 AI:", style="bold magenta")
                body = RichText(f"  {message.content}", style="grey70")
            parts.extend([label, body])
        indicator = render_scroll_indicator(chat, scroll_focused)
        if indicator:
            parts.append(RichText.from_markup(indicator))
        if controller.awaiting_reply:
            parts.append(RichText("MockingBird is typing...", style="italic dim"))
        parts.append(RichText("─" * 40, style="dim"))
        parts.append(RichText("💬 ", style="green") + render_editor(
            controller.chat_input, chat_active, placeholder=self.PLACEHOLDER,
        ))
        if controller.status:
            parts.append(RichText(controller.status, style="yellow"))
        self.update(RichGroup(*parts))


class FeedbackPanel(Static):
    """Interview feedback shown after the countdown ends."""

    DEFAULT_CSS = """
    FeedbackPanel {
        height: 1fr;
        border: round $success;
        padding: 1;
    }
    """

    def update_feedback(self, controller: SessionController) -> None:
        if controller.phase is SessionPhase.ENDED_GENERATING:
            body = RichText("Generating feedback...", style="dim")
        else:
            style = "red" if controller.phase is SessionPhase.ENDED_ERROR else ""
            body = RichText(controller.feedback or "", style=style)
        self.update(RichGroup(
            RichText("🎯 Interview Feedback\n", style="bold blue"),
            body,
            RichText.from_markup("\n[dim]Press [green]'q'[/green] or [green]'Enter'[/green] to return to start[/dim]"),
        ))


class MockingbirdApp(App):
    """Textual TUI for a timed mock coding interview."""

    CSS = CSS

    # Priority so Screen focus-cycling and other defaults never see these keys
    BINDINGS = [
        Binding("ctrl+w", "session_key('toggle_nav')", "Navigate", priority=True),
        Binding("ctrl+s", "session_key('submit')", "Submit", priority=True),
        Binding("ctrl+x", "session_key('end_interview')", "End", priority=True),
        Binding("tab", "session_key('tab')", "Indent", show=False, priority=True),
        Binding("shift+tab", "session_key('shift_tab')", "Unindent", show=False, priority=True),
    ]

    class Deliver(Message):
        """Message carrying a session callback from a worker thread."""
        def __init__(self, callback: Callable[[], None]) -> None:
            super().__init__()
            self.callback = callback

    def __init__(
        self,
        client: "InterviewerClient",
        interview: "InterviewConfig | None" = None,
        username: str = "",
    ) -> None:
        super().__init__()
        self.username = username
        kwargs = {}
        if interview is not None:
            kwargs = dict(
                duration=interview.duration_seconds,
                chat_window=interview.chat_window,
                code_height=interview.code_height,
                chat_input_height=interview.chat_input_height,
            )
        self.controller = SessionController(
            client,
            deliver=self._deliver,
            on_exit=self.exit,
            **kwargs,
        )

    def compose(self) -> ComposeResult:
        yield HeaderPanel(id="header")
        yield Static(WELCOME, id="welcome")
        with Vertical(id="workspace"):
            with Horizontal(id="top-row"):
                yield QuestionPanel(id="question")
                yield CodePanel(id="code")
            yield ChatPanel(id="chat")
        yield FeedbackPanel(id="feedback")
        yield Footer(id="footer")

    def on_mount(self) -> None:
        self._refresh_all()
        self.set_interval(1.0, self._tick)

    def _deliver(self, callback: Callable[[], None]) -> None:
        """Called from client worker threads - post message for thread safety."""
        self.post_message(self.Deliver(callback))

    @on(Deliver)
    def handle_deliver(self, message: Deliver) -> None:
        message.callback()
        self._refresh_all()

    def _tick(self) -> None:
        self.controller.tick()
        self._refresh_all()

    def action_session_key(self, name: str) -> None:
        self._dispatch(KeyEvent(Key(name)))

    async def action_quit(self) -> None:
        """Textual's built-in quit (Ctrl+Q) exits only from the start screen."""
        self.controller.exit()
        if self.controller.phase is not SessionPhase.CLOSED:
            self.notify("Finish the interview first: Ctrl+X ends it early", severity="warning")

    def on_key(self, event: events.Key) -> None:
        key = KEY_MAP.get(event.key)
        if key is not None:
            session_event = KeyEvent(key)
        elif event.is_printable and event.character:
            session_event = KeyEvent.typed(event.character)
        else:
            return
        event.stop()
        event.prevent_default()
        self._dispatch(session_event)

    def on_paste(self, event: events.Paste) -> None:
        if event.text:
            self._dispatch(KeyEvent.typed(event.text))

    def _dispatch(self, event: KeyEvent) -> None:
        self.controller.handle_key(event)
        if self.controller.phase is not SessionPhase.CLOSED:
            self._refresh_all()

    def _refresh_all(self) -> None:
        controller = self.controller
        phase = controller.phase
        self.query_one("#header", HeaderPanel).update_header(self.username, controller)

        welcome = self.query_one("#welcome", Static)
        workspace = self.query_one("#workspace", Vertical)
        feedback = self.query_one("#feedback", FeedbackPanel)
        welcome.set_class(phase is not SessionPhase.IDLE, "hidden")
        workspace.set_class(phase is not SessionPhase.ACTIVE, "hidden")
        feedback.set_class(
            phase not in (SessionPhase.ENDED_GENERATING, SessionPhase.ENDED_FEEDBACK, SessionPhase.ENDED_ERROR),
            "hidden",
        )

        if phase is SessionPhase.ACTIVE:
            self.query_one("#question", QuestionPanel).update_question(controller)
            self.query_one("#code", CodePanel).update_code(controller)
            self.query_one("#chat", ChatPanel).update_chat(controller)
        elif phase is not SessionPhase.IDLE:
            feedback.update_feedback(controller)
