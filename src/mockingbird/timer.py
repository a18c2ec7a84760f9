"""One-shot interview countdown."""

import logging
from typing import Callable

logger = logging.getLogger(__name__)

# 45 minutes
DEFAULT_DURATION = 2700


def format_time(seconds: int) -> str:
    """Format seconds as ``MM:SS``."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


class Countdown:
    """Counts down from ``duration`` one tick at a time and fires once at zero.

    The owner drives it by calling ``tick()`` once per second. ``on_complete``
    runs exactly once per ``start()``; ``cancel()`` stops without firing.
    """

    def __init__(self, duration: int = DEFAULT_DURATION, on_complete: Callable[[], None] | None = None) -> None:
        if duration < 1:
            raise ValueError("countdown duration must be at least 1 second")
        self.duration = duration
        self.on_complete = on_complete
        self.remaining_seconds = duration
        self.running = False
        self.completed = False

    @property
    def elapsed_seconds(self) -> int:
        return self.duration - self.remaining_seconds

    def start(self) -> None:
        """Stop any current countdown and start a fresh one."""
        self.remaining_seconds = self.duration
        self.completed = False
        self.running = True
        logger.debug(f"Countdown started ({format_time(self.duration)})")

    def tick(self) -> None:
        if not self.running:
            return
        self.remaining_seconds = max(0, self.remaining_seconds - 1)
        if self.remaining_seconds == 0:
            self.running = False
            self._fire()

    def cancel(self) -> None:
        """Stop ticking and discard the remaining time without firing."""
        if self.running:
            logger.debug(f"Countdown cancelled with {format_time(self.remaining_seconds)} left")
        self.running = False
        self.remaining_seconds = 0

    def reset(self) -> None:
        self.running = False
        self.completed = False
        self.remaining_seconds = self.duration

    def _fire(self) -> None:
        if self.completed:
            return
        self.completed = True
        logger.debug("Countdown complete")
        if self.on_complete:
            self.on_complete()
