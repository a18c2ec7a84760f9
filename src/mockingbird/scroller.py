"""Windowing over ordered sequences (editor lines, chat messages).

All functions are pure: they take the current offset and sequence length and
return a new offset (or range) that satisfies

    0 <= offset <= max(0, n - window_size)
"""

from dataclasses import dataclass


def max_offset(n: int, window_size: int) -> int:
    """Largest valid first-visible index for a sequence of length ``n``."""
    return max(0, n - window_size)


def _clamp(offset: int, n: int, window_size: int) -> int:
    return min(max(offset, 0), max_offset(n, window_size))


def visible_range(offset: int, n: int, window_size: int) -> tuple[int, int]:
    """Return the half-open ``[start, end)`` slice visible at ``offset``."""
    start = _clamp(offset, n, window_size)
    end = min(n, start + window_size)
    return start, end


def ensure_visible(target: int, offset: int, n: int, window_size: int) -> int:
    """Return an offset that keeps index ``target`` inside the window.

    Moves the window the minimum distance needed: up to the target if it is
    above, or just far enough down to show it as the last visible row.
    """
    new_offset = offset
    if target < offset:
        new_offset = target
    elif target >= offset + window_size:
        new_offset = target - window_size + 1
    return _clamp(new_offset, n, window_size)


def scroll_by(offset: int, delta: int, n: int, window_size: int) -> int:
    """Return ``offset`` moved by ``delta``, clamped to the valid range."""
    return _clamp(offset + delta, n, window_size)


@dataclass
class ScrollState:
    """Scroll position over a sequence with a fixed window height."""

    window_size: int
    offset: int = 0

    def range(self, n: int) -> tuple[int, int]:
        return visible_range(self.offset, n, self.window_size)

    def follow(self, target: int, n: int) -> None:
        self.offset = ensure_visible(target, self.offset, n, self.window_size)

    def scroll(self, delta: int, n: int) -> None:
        self.offset = scroll_by(self.offset, delta, n, self.window_size)

    def to_end(self, n: int) -> None:
        self.offset = max_offset(n, self.window_size)

    def reset(self) -> None:
        self.offset = 0
