"""Keyboard focus routing between the code, chat and scroll panes."""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class FocusArea(str, Enum):
    """Pane that receives keyboard input."""
    CODE = "code"
    CHAT = "chat"
    SCROLL = "scroll"


# Navigation-mode cycles. Up visits scroll before chat, down visits chat before scroll.
_UP_CYCLE = {
    FocusArea.CODE: FocusArea.SCROLL,
    FocusArea.SCROLL: FocusArea.CHAT,
    FocusArea.CHAT: FocusArea.CODE,
}
_DOWN_CYCLE = {
    FocusArea.CODE: FocusArea.CHAT,
    FocusArea.CHAT: FocusArea.SCROLL,
    FocusArea.SCROLL: FocusArea.CODE,
}

INITIAL_FOCUS = FocusArea.CHAT


class FocusRouter:
    """Selects the pane that keyboard input is delegated to.

    With navigation mode on, up/down arrows move focus and every other key is
    dropped. With it off, the router returns the focused pane and does not look
    at the key at all.
    """

    def __init__(self) -> None:
        self.focus = INITIAL_FOCUS
        self.navigation_mode = False

    def toggle_navigation(self) -> None:
        self.navigation_mode = not self.navigation_mode
        logger.debug(f"Navigation mode {'on' if self.navigation_mode else 'off'} (focus={self.focus.value})")

    def focus_up(self) -> None:
        if self.navigation_mode:
            self.focus = _UP_CYCLE[self.focus]

    def focus_down(self) -> None:
        if self.navigation_mode:
            self.focus = _DOWN_CYCLE[self.focus]

    def target(self) -> FocusArea | None:
        """Pane that should receive a non-navigation key, or None in navigation mode."""
        if self.navigation_mode:
            return None
        return self.focus

    def is_active(self, area: FocusArea) -> bool:
        """True if ``area`` is focused and accepting input."""
        return self.focus is area and not self.navigation_mode

    def reset(self) -> None:
        self.focus = INITIAL_FOCUS
        self.navigation_mode = False
