"""Interview session controller: key routing and the phase state machine.

All state changes happen on the caller's thread through ``handle_key``,
``tick`` and the result handlers that the ``deliver`` hook schedules. The
interviewer client runs calls on its own workers; their callbacks never touch
session state directly, they hand a closure to ``deliver`` which must run it
on the event thread (the TUI posts it as a message).
"""

import logging
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .chat import ChatMessage, ChatViewport, render_history
from .client import InterviewerClient
from .editor import Direction, EditorPane
from .focus import FocusArea, FocusRouter
from .questions import Question, random_question
from .timer import DEFAULT_DURATION, Countdown, format_time

logger = logging.getLogger(__name__)

GREETING = (
    "Hello! I am MockingBird, your AI interviewer. If you need any additional information about the "
    "coding question, please let me know. Otherwise you may begin coding and talk me through your "
    "thought process."
)
CHAT_ERROR_MESSAGE = (
    "Sorry, I'm having trouble connecting right now. Please try again later. (Error: {error})"
)
FEEDBACK_FALLBACK = (
    "Sorry, feedback could not be generated for this interview. Your conversation was not lost on "
    "our side, but we could not reach the interviewer service. (Error: {error})"
)


class SessionPhase(str, Enum):
    """Lifecycle phase of the interview session."""
    IDLE = "idle"
    ACTIVE = "active"
    ENDED_GENERATING = "ended_generating"
    ENDED_FEEDBACK = "ended_feedback"
    ENDED_ERROR = "ended_error"
    CLOSED = "closed"

    @property
    def is_ended(self) -> bool:
        return self in (SessionPhase.ENDED_FEEDBACK, SessionPhase.ENDED_ERROR)


class Key(str, Enum):
    """Abstract keyboard keys, independent of the terminal library."""
    CHAR = "char"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    TAB = "tab"
    SHIFT_TAB = "shift_tab"
    BACKSPACE = "backspace"
    DELETE = "delete"
    ENTER = "enter"
    SUBMIT = "submit"
    TOGGLE_NAV = "toggle_nav"
    END_INTERVIEW = "end_interview"


@dataclass(frozen=True)
class KeyEvent:
    """A key press. ``char`` holds the typed text for ``Key.CHAR``."""

    key: Key
    char: str = ""

    @classmethod
    def typed(cls, char: str) -> "KeyEvent":
        return cls(Key.CHAR, char)


_ARROWS = {
    Key.UP: Direction.UP,
    Key.DOWN: Direction.DOWN,
    Key.LEFT: Direction.LEFT,
    Key.RIGHT: Direction.RIGHT,
}


def _run_now(fn: Callable[[], None]) -> None:
    fn()


class SessionController:
    """Owns every piece of interview state and drives the phase machine.

    Phases: idle → active → ended_generating → ended_feedback | ended_error → idle,
    and idle → closed.
    """

    def __init__(
        self,
        client: InterviewerClient,
        duration: int = DEFAULT_DURATION,
        chat_window: int = 4,
        code_height: int = 6,
        chat_input_height: int = 3,
        deliver: Callable[[Callable[[], None]], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
        on_exit: Callable[[], None] | None = None,
    ) -> None:
        self.client = client
        self.phase = SessionPhase.IDLE
        self.focus = FocusRouter()
        self.code = EditorPane(code_height)
        self.chat_input = EditorPane(chat_input_height)
        self.chat = ChatViewport(window_size=chat_window, clock=clock)
        self.timer = Countdown(duration, on_complete=self._on_timer_complete)
        self.question: Question | None = None
        self.submitted_code = ""
        self.feedback: str | None = None
        self.status: str | None = None
        self.on_exit = on_exit
        self._deliver = deliver or _run_now
        self._rng = rng
        # Incremented on every start and close; results tagged with an older round are dropped
        self._round = 0
        self._chat_in_flight = False

    @property
    def awaiting_reply(self) -> bool:
        return self._chat_in_flight

    @property
    def messages(self) -> list[ChatMessage]:
        return self.chat.messages

    # Event entry points

    def handle_key(self, event: KeyEvent) -> None:
        if self.phase is SessionPhase.IDLE:
            self._handle_idle_key(event)
        elif self.phase is SessionPhase.ACTIVE:
            self._handle_active_key(event)
        elif self.phase.is_ended:
            if event.key is Key.ENTER or (event.key is Key.CHAR and event.char.lower() == "q"):
                self.close()
        # ended_generating and closed accept no input

    def tick(self) -> None:
        """Advance the countdown by one second."""
        self.timer.tick()

    # Transitions

    def start(self) -> bool:
        """Begin a new interview. Only accepted while idle."""
        if self.phase is not SessionPhase.IDLE:
            return False
        self._round += 1
        self._clear_round_state()
        self.question = random_question(self._rng)
        self.chat.append(ChatMessage("assistant", GREETING))
        self.phase = SessionPhase.ACTIVE
        self.timer.start()
        logger.info(f"Interview started (round {self._round}, question={self.question.id})")
        return True

    def end_interview(self) -> None:
        """Leave the active phase early."""
        if self.phase is not SessionPhase.ACTIVE:
            return
        self.timer.cancel()
        self._begin_feedback()

    def close(self) -> None:
        """Acknowledge the feedback and return to idle."""
        if not self.phase.is_ended:
            return
        self._round += 1
        self._clear_round_state()
        self.phase = SessionPhase.IDLE
        logger.info("Interview closed")

    def exit(self) -> None:
        if self.phase is not SessionPhase.IDLE:
            return
        self.phase = SessionPhase.CLOSED
        if self.on_exit:
            self.on_exit()

    def _clear_round_state(self) -> None:
        self.timer.reset()
        self.chat.clear()
        self.code.reset()
        self.chat_input.reset()
        self.focus.reset()
        self.question = None
        self.submitted_code = ""
        self.feedback = None
        self.status = None
        self._chat_in_flight = False

    def _on_timer_complete(self) -> None:
        if self.phase is SessionPhase.ACTIVE:
            logger.info("Time is up")
            self._begin_feedback()

    def _begin_feedback(self) -> None:
        self.phase = SessionPhase.ENDED_GENERATING
        self.status = None
        history = render_history(self.chat.messages)
        self.client.feedback_async(history, self._bind(self._on_feedback_result))

    # Key handling per phase and pane

    def _handle_idle_key(self, event: KeyEvent) -> None:
        if event.key is not Key.CHAR:
            return
        if event.char.lower() == "s":
            self.start()
        elif event.char.lower() == "q":
            self.exit()

    def _handle_active_key(self, event: KeyEvent) -> None:
        if event.key is Key.TOGGLE_NAV:
            self.focus.toggle_navigation()
            return
        if event.key is Key.END_INTERVIEW:
            self.end_interview()
            return

        target = self.focus.target()
        if target is None:
            if event.key is Key.UP:
                self.focus.focus_up()
            elif event.key is Key.DOWN:
                self.focus.focus_down()
            return

        if target is FocusArea.CODE:
            self._handle_code_key(event)
        elif target is FocusArea.CHAT:
            self._handle_chat_key(event)
        else:
            self._handle_scroll_key(event)

    def _handle_code_key(self, event: KeyEvent) -> None:
        pane = self.code
        buffer = pane.buffer
        key = event.key
        if key is Key.CHAR:
            pane.edit(buffer.insert_text, event.char)
        elif key is Key.ENTER:
            pane.edit(buffer.newline)
        elif key is Key.TAB:
            pane.edit(buffer.indent)
        elif key is Key.SHIFT_TAB:
            pane.edit(buffer.outdent)
        elif key is Key.BACKSPACE:
            pane.edit(buffer.backspace)
        elif key is Key.DELETE:
            pane.edit(buffer.delete)
        elif key in _ARROWS:
            pane.edit(buffer.move_cursor, _ARROWS[key])
        elif key is Key.PAGE_UP:
            pane.page(-1)
        elif key is Key.PAGE_DOWN:
            pane.page(1)
        elif key is Key.SUBMIT:
            code = pane.submit()
            if code is not None:
                self.submitted_code = code
                self.status = "Code submitted"
                logger.debug(f"Code submitted ({len(code)} chars)")

    def _handle_chat_key(self, event: KeyEvent) -> None:
        pane = self.chat_input
        buffer = pane.buffer
        key = event.key
        if key is Key.CHAR:
            pane.edit(buffer.insert_text, event.char)
        elif key is Key.ENTER:
            # Enter on an empty last line sends, anywhere else it breaks the line
            if buffer.cursor_on_last_line and not buffer.current_line.strip():
                self.send_chat()
            else:
                pane.edit(buffer.newline)
        elif key is Key.SUBMIT:
            self.send_chat()
        elif key is Key.BACKSPACE:
            pane.edit(buffer.backspace)
        elif key is Key.DELETE:
            pane.edit(buffer.delete)
        elif key in _ARROWS:
            pane.edit(buffer.move_cursor, _ARROWS[key])

    def _handle_scroll_key(self, event: KeyEvent) -> None:
        if event.key is Key.UP:
            self.chat.scroll_lines(-1)
        elif event.key is Key.DOWN:
            self.chat.scroll_lines(1)
        elif event.key is Key.PAGE_UP:
            self.chat.scroll_pages(-1)
        elif event.key is Key.PAGE_DOWN:
            self.chat.scroll_pages(1)

    # Chat turn

    def send_chat(self) -> bool:
        """Send the chat draft as a user message and request a reply.

        At most one chat request is outstanding; while one is in flight the
        draft stays in the input.
        """
        if self.phase is not SessionPhase.ACTIVE:
            return False
        if self._chat_in_flight:
            self.status = "Waiting for the interviewer to reply..."
            return False
        text = self.chat_input.submit()
        if text is None:
            return False
        self.status = None
        self.chat.append(ChatMessage("user", text))
        self._chat_in_flight = True
        self.client.chat_async(
            [m.to_dict() for m in self.chat.messages],
            self._chat_context(),
            self._bind(self._on_chat_result),
        )
        return True

    def _chat_context(self) -> dict[str, str]:
        current = self.code.buffer.text.strip()
        return {
            "submittedCode": current or self.submitted_code,
            "question": self.question.description if self.question else "",
            "interviewTime": format_time(self.timer.elapsed_seconds),
        }

    # Results from the client

    def _bind(self, handler: Callable[[int, str, bool], None]) -> Callable[[str, bool], None]:
        """Wrap a result handler as a client callback tagged with the current round."""
        round_id = self._round

        def callback(payload: str, success: bool) -> None:
            self._deliver(lambda: handler(round_id, payload, success))

        return callback

    def _on_chat_result(self, round_id: int, payload: str, success: bool) -> None:
        if round_id != self._round:
            logger.debug("Dropped chat reply from a previous round")
            return
        self._chat_in_flight = False
        if success:
            content = payload
        else:
            logger.warning(f"Chat request failed: {payload}")
            content = CHAT_ERROR_MESSAGE.format(error=payload)
        # Replies that arrive after the active phase only extend the transcript
        self.chat.append(ChatMessage("assistant", content))

    def _on_feedback_result(self, round_id: int, payload: str, success: bool) -> None:
        if round_id != self._round or self.phase is not SessionPhase.ENDED_GENERATING:
            logger.debug("Dropped stale feedback result")
            return
        if success:
            self.feedback = payload
            self.phase = SessionPhase.ENDED_FEEDBACK
        else:
            logger.warning(f"Feedback request failed: {payload}")
            self.feedback = FEEDBACK_FALLBACK.format(error=payload)
            self.phase = SessionPhase.ENDED_ERROR
