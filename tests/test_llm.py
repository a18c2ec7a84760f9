"""Tests for the direct LLM interviewer backend."""

from unittest.mock import MagicMock, patch

import pytest

from mockingbird.errors import NetworkFailure
from mockingbird.llm import FEEDBACK_SYSTEM_PROMPT, LLMInterviewerClient, format_interview_prompt


def _completion(content):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


class TestFormatInterviewPrompt:
    def test_includes_context_and_conversation(self):
        prompt = format_interview_prompt(
            [
                {"role": "assistant", "content": "Hello!"},
                {"role": "user", "content": "Can I sort first?"},
            ],
            {"interviewTime": "05:30", "question": "Two sum", "submittedCode": "def f(): pass"},
        )
        assert "Interview has been active for 05:30" in prompt
        assert "- Question: Two sum" in prompt
        assert "- Candidate submitted code: def f(): pass" in prompt
        assert "Interviewer: Hello!\nCandidate: Can I sort first?" in prompt

    def test_missing_context(self):
        prompt = format_interview_prompt([{"role": "user", "content": "hi"}])
        assert "active for some time" in prompt
        assert "Question:" not in prompt
        assert "submitted code" not in prompt

    def test_malformed_messages_skipped(self):
        prompt = format_interview_prompt([
            {"role": "user"},
            {"content": "orphan"},
            "not a message",
            {"role": "user", "content": "kept"},
        ])
        assert "orphan" not in prompt
        assert "Candidate: kept" in prompt


class TestLLMInterviewerClient:
    def test_chat_uses_litellm(self):
        client = LLMInterviewerClient(model="openai/gpt-4o-mini")
        try:
            with patch("mockingbird.llm.litellm.completion", return_value=_completion("  Go on.  ")) as completion:
                reply = client.chat([{"role": "user", "content": "hi"}], {"interviewTime": "00:01"})
            assert reply == "Go on."
            kwargs = completion.call_args.kwargs
            assert kwargs["model"] == "openai/gpt-4o-mini"
            assert kwargs["messages"][0]["role"] == "user"
            assert "Candidate: hi" in kwargs["messages"][0]["content"]
        finally:
            client.shutdown()

    def test_feedback_sends_transcript(self):
        client = LLMInterviewerClient(model="gemini/gemini-2.5-flash")
        try:
            with patch("mockingbird.llm.litellm.completion", return_value=_completion("Solid work.")) as completion:
                assert client.feedback("User: hi") == "Solid work."
            messages = completion.call_args.kwargs["messages"]
            assert messages[0] == {"role": "system", "content": FEEDBACK_SYSTEM_PROMPT}
            assert messages[1]["content"].endswith("User: hi")
        finally:
            client.shutdown()

    def test_api_base_uses_openai_sdk(self):
        client = LLMInterviewerClient(model="qwen2.5:7b", api_base="http://localhost:11434/v1/")
        try:
            with patch("mockingbird.llm.openai.OpenAI") as openai_cls:
                openai_cls.return_value.chat.completions.create.return_value = _completion("Hi")
                assert client.chat([], {}) == "Hi"
            assert openai_cls.call_args.kwargs["base_url"] == "http://localhost:11434/v1"
            assert openai_cls.call_args.kwargs["api_key"] == "no-key-required"
        finally:
            client.shutdown()

    def test_empty_response_is_failure(self):
        client = LLMInterviewerClient(model="openai/gpt-4o-mini")
        try:
            with patch("mockingbird.llm.litellm.completion", return_value=_completion("")):
                with pytest.raises(NetworkFailure, match="empty response"):
                    client.chat([], {})
        finally:
            client.shutdown()

    def test_connection_error_is_network_failure(self):
        client = LLMInterviewerClient(model="ollama/qwen2.5:7b")
        try:
            with patch("mockingbird.llm.litellm.completion", side_effect=ConnectionError("refused")):
                with pytest.raises(NetworkFailure, match="not available"):
                    client.chat([], {})
        finally:
            client.shutdown()
