"""Direct LLM interviewer backend using litellm or the openai SDK."""

import logging
from typing import Any

import litellm
import openai

from .client import InterviewerClient
from .errors import ConfigurationError, NetworkFailure, RateLimitExceeded

logger = logging.getLogger(__name__)

# Suppress litellm's verbose debug/info logging
litellm.suppress_debug_info = True

INTERVIEWER_GUIDELINES = (
    "Guidelines:\n"
    "- Ask relevant coding questions and follow-ups\n"
    "- Be encouraging but thorough\n"
    "- Focus on algorithms, data structures, and best practices\n"
    "- Ask for code explanations when appropriate\n"
    "- Be conversational and engaging"
)

FEEDBACK_SYSTEM_PROMPT = (
    "You are MockingBird, an AI technical interviewer. The coding interview below has ended. "
    "Write feedback for the candidate: overall impression, problem-solving approach, "
    "communication, code quality, and two or three concrete things to practice next. "
    "Be honest, specific and encouraging. Use plain text, no markdown headers."
)


def format_interview_prompt(messages: list[dict[str, Any]], context: dict[str, Any] | None = None) -> str:
    """Build the interviewer prompt from the transcript and interview context.

    Malformed messages (missing role or content) are skipped.
    """
    context = context or {}
    valid = [
        {"role": str(m["role"]), "content": str(m["content"])}
        for m in messages
        if isinstance(m, dict) and m.get("role") is not None and m.get("content") is not None
    ]
    conversation = "\n".join(
        f"{'Candidate' if m['role'] == 'user' else 'Interviewer'}: {m['content']}" for m in valid
    )

    lines = [
        "You are MockingBird, an AI technical interviewer conducting a coding interview.",
        "",
        "Context:",
        f"- Interview has been active for {context.get('interviewTime') or 'some time'}",
    ]
    if context.get("question"):
        lines.append(f"- Question: {context['question']}")
    if context.get("submittedCode"):
        lines.append(f"- Candidate submitted code: {context['submittedCode']}")
    lines += [
        "",
        INTERVIEWER_GUIDELINES,
        "",
        "Recent conversation:",
        conversation,
        "",
        "Respond as the interviewer. Keep your response focused and professional.",
    ]
    return "\n".join(lines)


class LLMInterviewerClient(InterviewerClient):
    """Interviewer that talks to an LLM directly instead of the HTTP service.

    Routing:
    - api_base set → openai SDK direct (local/custom OpenAI-compatible servers)
    - otherwise    → litellm (cloud providers with auto-routing)
    """

    name = "llm"

    def __init__(
        self,
        model: str,
        api_base: str | None = None,
        api_key: str | None = None,
        max_workers: int = 2,
    ) -> None:
        super().__init__(max_workers=max_workers)
        self.model = model
        self.api_base = api_base.rstrip("/") if api_base else None
        self.api_key = api_key

    def _call_llm(self, messages: list[dict[str, str]], max_tokens: int) -> str:
        try:
            if self.api_base:
                client = openai.OpenAI(
                    base_url=self.api_base,
                    api_key=self.api_key or "no-key-required",
                )
                response = client.chat.completions.create(
                    model=self.model,
                    messages=messages,
                    max_tokens=max_tokens,
                    temperature=0.7,
                )
            else:
                kwargs: dict = {
                    "model": self.model,
                    "messages": messages,
                    "max_tokens": max_tokens,
                    "temperature": 0.7,
                }
                if self.api_key:
                    kwargs["api_key"] = self.api_key
                response = litellm.completion(**kwargs)
        except (litellm.exceptions.AuthenticationError, openai.AuthenticationError) as e:
            raise ConfigurationError(f"{self.model}: authentication failed") from e
        except (litellm.exceptions.RateLimitError, openai.RateLimitError) as e:
            raise RateLimitExceeded(f"{self.model}: rate limit exceeded") from e
        except (litellm.exceptions.Timeout, openai.APITimeoutError) as e:
            raise NetworkFailure(f"{self.model} request timed out") from e
        except (litellm.exceptions.APIConnectionError, openai.APIConnectionError, ConnectionError) as e:
            raise NetworkFailure(f"{self.model} server not available") from e

        content = response.choices[0].message.content
        if not content:
            raise NetworkFailure(f"{self.model} returned an empty response")
        return content.strip()

    def chat(self, messages: list[dict[str, str]], context: dict[str, str]) -> str:
        prompt = format_interview_prompt(messages, context)
        return self._call_llm([{"role": "user", "content": prompt}], max_tokens=600)

    def feedback(self, history: str) -> str:
        return self._call_llm(
            [
                {"role": "system", "content": FEEDBACK_SYSTEM_PROMPT},
                {"role": "user", "content": f"Interview transcript:\n\n{history}"},
            ],
            max_tokens=1200,
        )
