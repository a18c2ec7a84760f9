"""Tests for the Textual interview app driven through the pilot."""

import pytest

from mockingbird.chat import ChatMessage, ChatViewport
from mockingbird.client import InterviewerClient
from mockingbird.config import InterviewConfig
from mockingbird.focus import FocusArea
from mockingbird.session import SessionPhase
from mockingbird.tui_textual import (
    ChatPanel,
    CodePanel,
    MockingbirdApp,
    render_scroll_indicator,
)


class FakeClient(InterviewerClient):
    def __init__(self):
        super().__init__(max_workers=1)
        self.chat_calls = []
        self.feedback_calls = []

    def chat_async(self, messages, context, callback):
        self.chat_calls.append((messages, context, callback))

    def feedback_async(self, history, callback):
        self.feedback_calls.append((history, callback))


def _make_app(client: FakeClient | None = None) -> MockingbirdApp:
    return MockingbirdApp(client or FakeClient(), interview=InterviewConfig(duration_seconds=600), username="ada")


def _hidden(app: MockingbirdApp, selector: str) -> bool:
    return app.query_one(selector).has_class("hidden")


@pytest.mark.asyncio
async def test_start_screen_then_start():
    app = _make_app()
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause()
        assert app.controller.phase is SessionPhase.IDLE
        assert not _hidden(app, "#welcome")
        assert _hidden(app, "#workspace")

        await pilot.press("s")
        await pilot.pause()
        assert app.controller.phase is SessionPhase.ACTIVE
        assert _hidden(app, "#welcome")
        assert not _hidden(app, "#workspace")
        assert app.query_one("#chat", ChatPanel).has_class("pane-focused")


@pytest.mark.asyncio
async def test_chat_round_trip_through_worker_message():
    client = FakeClient()
    app = _make_app(client)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.press("s", "h", "i", "enter", "enter")
        await pilot.pause()
        assert len(client.chat_calls) == 1
        assert app.controller.awaiting_reply

        # Simulate the worker thread completing the request
        client.chat_calls[0][2]("What is your approach?", True)
        await pilot.pause()
        assert not app.controller.awaiting_reply
        assert app.controller.messages[-1].content == "What is your approach?"


@pytest.mark.asyncio
async def test_navigation_mode_moves_focus_to_code():
    app = _make_app()
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.press("s", "ctrl+w")
        await pilot.pause()
        assert app.controller.focus.navigation_mode

        await pilot.press("up")
        assert app.controller.focus.focus is FocusArea.CODE
        await pilot.press("ctrl+w")
        await pilot.pause()
        assert app.query_one("#code", CodePanel).has_class("pane-focused")

        await pilot.press("x", "tab")
        assert app.controller.code.buffer.lines == ["    x"]


@pytest.mark.asyncio
async def test_end_interview_shows_feedback_then_returns_to_start():
    client = FakeClient()
    app = _make_app(client)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.press("s", "ctrl+x")
        await pilot.pause()
        assert app.controller.phase is SessionPhase.ENDED_GENERATING
        assert not _hidden(app, "#feedback")
        assert _hidden(app, "#workspace")

        client.feedback_calls[0][1]("Nice job explaining trade-offs.", True)
        await pilot.pause()
        assert app.controller.phase is SessionPhase.ENDED_FEEDBACK
        assert app.controller.feedback == "Nice job explaining trade-offs."
        assert not _hidden(app, "#feedback")

        await pilot.press("enter")
        await pilot.pause()
        assert app.controller.phase is SessionPhase.IDLE
        assert not _hidden(app, "#welcome")


@pytest.mark.asyncio
async def test_quit_from_start_screen():
    app = _make_app()
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.press("q")
        assert app.controller.phase is SessionPhase.CLOSED


@pytest.mark.asyncio
async def test_ctrl_q_ignored_during_interview():
    client = FakeClient()
    app = _make_app(client)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.press("s", "ctrl+q")
        await pilot.pause()
        assert app.is_running
        assert app.controller.phase is SessionPhase.ACTIVE

        await pilot.press("ctrl+x", "ctrl+q")
        await pilot.pause()
        assert app.is_running
        assert app.controller.phase is SessionPhase.ENDED_GENERATING

        client.feedback_calls[0][1]("Feedback.", True)
        await pilot.pause()
        await pilot.press("ctrl+q")
        await pilot.pause()
        assert app.is_running
        assert app.controller.phase is SessionPhase.ENDED_FEEDBACK


@pytest.mark.asyncio
async def test_ctrl_q_exits_from_start_screen():
    app = _make_app()
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.press("ctrl+q")
        assert app.controller.phase is SessionPhase.CLOSED


def test_scroll_indicator():
    viewport = ChatViewport(window_size=2)
    assert render_scroll_indicator(viewport, False) is None
    for i in range(4):
        viewport.append(ChatMessage("user", str(i)))
    assert render_scroll_indicator(viewport, False) == "[dim]↑ Scroll up (2 messages above)[/dim]"
    viewport.scroll_lines(-1)
    indicator = render_scroll_indicator(viewport, True)
    assert indicator.startswith("[yellow]\\[SCROLL MODE] ")
    assert "1 messages above" in indicator
    assert "1 messages below" in indicator
