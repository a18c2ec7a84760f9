"""Chat transcript and its scrollable history viewport."""

import time
from dataclasses import dataclass
from typing import Callable, Literal

from .scroller import ScrollState

# How long a manual scroll suppresses auto-follow, in seconds
MANUAL_SCROLL_DECAY = 1.0

Role = Literal["user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    """A single chat message. Immutable once appended."""

    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


def render_history(messages: list[ChatMessage]) -> str:
    """Render a transcript as ``"<Role>: <content>"`` lines."""
    return "\n".join(f"{m.role.capitalize()}: {m.content}" for m in messages)


class ChatViewport:
    """Ordered chat messages viewed through a window of ``window_size`` messages.

    By default the window auto-follows: each append snaps it to the newest
    messages. Scrolling by hand sets ``manual_scroll`` for one decay period;
    while it is set, appends leave the window where the user put it. When the
    decay expires nothing moves until the next append.
    """

    def __init__(
        self,
        window_size: int = 4,
        decay: float = MANUAL_SCROLL_DECAY,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.messages: list[ChatMessage] = []
        self._scroll = ScrollState(window_size=window_size)
        self._decay = decay
        self._clock = clock
        self._manual_until: float | None = None

    @property
    def window_size(self) -> int:
        return self._scroll.window_size

    @property
    def offset(self) -> int:
        return self._scroll.offset

    @property
    def manual_scroll(self) -> bool:
        return self._manual_until is not None and self._clock() < self._manual_until

    @property
    def has_overflow(self) -> bool:
        """True when there are more messages than fit (scroll indicator shown)."""
        return len(self.messages) > self.window_size

    @property
    def messages_above(self) -> int:
        return self._scroll.range(len(self.messages))[0]

    @property
    def messages_below(self) -> int:
        return len(self.messages) - self._scroll.range(len(self.messages))[1]

    def visible_messages(self) -> list[ChatMessage]:
        start, end = self._scroll.range(len(self.messages))
        return self.messages[start:end]

    def append(self, message: ChatMessage) -> None:
        self.messages.append(message)
        n = len(self.messages)
        if n <= self.window_size:
            self._scroll.reset()
        elif not self.manual_scroll:
            self._scroll.to_end(n)

    def scroll_lines(self, delta: int) -> None:
        self._manual(delta)

    def scroll_pages(self, pages: int) -> None:
        self._manual(pages * self.window_size)

    def _manual(self, delta: int) -> None:
        self._scroll.scroll(delta, len(self.messages))
        self._manual_until = self._clock() + self._decay

    def clear(self) -> None:
        self.messages = []
        self._scroll.reset()
        self._manual_until = None
