"""Interviewer service clients.

Calls run on a small thread pool and report back through callbacks of the
form ``callback(payload, success)``. On failure ``payload`` is a short,
human-readable error description; callbacks never receive an exception.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable

import requests

from .errors import ConfigurationError, NetworkFailure, RateLimitExceeded

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:3000"
DEFAULT_TIMEOUT = 60

ResultCallback = Callable[[str, bool], None]


class InterviewerClient:
    """Base class: owns the worker pool and turns errors into failed callbacks.

    Subclasses implement the blocking ``chat`` and ``feedback`` calls.
    """

    name = "interviewer"

    def __init__(self, max_workers: int = 2) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="mockingbird-client")

    def chat(self, messages: list[dict[str, str]], context: dict[str, str]) -> str:
        raise NotImplementedError

    def feedback(self, history: str) -> str:
        raise NotImplementedError

    def chat_async(
        self,
        messages: list[dict[str, str]],
        context: dict[str, str],
        callback: ResultCallback,
    ) -> None:
        """Submit a chat turn, calls callback with (reply or error, success)."""
        self._executor.submit(self._run, "chat", self.chat, (messages, context), callback)

    def feedback_async(self, history: str, callback: ResultCallback) -> None:
        """Submit feedback generation, calls callback with (feedback or error, success)."""
        self._executor.submit(self._run, "feedback", self.feedback, (history,), callback)

    def _run(self, label: str, call: Callable[..., str], args: tuple, callback: ResultCallback) -> None:
        try:
            result = call(*args)
        except RateLimitExceeded as e:
            logger.debug(f"{self.name} {label}: rate limited (retry after {e.retry_after})")
            callback(str(e), False)
        except (ConfigurationError, NetworkFailure) as e:
            logger.debug(f"{self.name} {label}: {e}")
            callback(str(e), False)
        except Exception as e:
            logger.debug(f"{self.name} {label} error: {e}", exc_info=True)
            callback(f"{type(e).__name__}: {e}", False)
        else:
            callback(result, True)

    def shutdown(self) -> None:
        """Shutdown the executor, cancelling pending calls."""
        self._executor.shutdown(wait=False, cancel_futures=True)


class HttpInterviewerClient(InterviewerClient):
    """Client for the MockingBird interviewer HTTP API."""

    name = "api"

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_workers: int = 2,
    ) -> None:
        super().__init__(max_workers=max_workers)
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-api-key"] = self.api_key
        return headers

    def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = requests.post(url, json=payload, headers=self._headers(), timeout=self.timeout)
        except requests.exceptions.ConnectionError as e:
            raise NetworkFailure(f"could not connect to {self.base_url}") from e
        except requests.exceptions.Timeout as e:
            raise NetworkFailure(f"request to {path} timed out") from e
        except requests.exceptions.RequestException as e:
            raise NetworkFailure(f"request to {path} failed: {e}") from e
        return self._parse(response, path)

    @staticmethod
    def _parse(response: requests.Response, path: str) -> dict[str, Any]:
        if response.status_code == 401:
            raise ConfigurationError("API request failed: 401 (invalid or missing API key)")
        if response.status_code == 429:
            retry_after = None
            message = "Too many requests. Please try again later."
            try:
                body = response.json()
                retry_after = body.get("retryAfter")
                message = body.get("message", message)
            except ValueError:
                pass
            raise RateLimitExceeded(f"API request failed: 429 ({message})", retry_after=retry_after)
        if not response.ok:
            raise NetworkFailure(f"API request failed: {response.status_code}")
        try:
            body = response.json()
        except ValueError as e:
            raise NetworkFailure(f"invalid JSON from {path}") from e
        if not isinstance(body, dict):
            raise NetworkFailure(f"unexpected response from {path}: expected a JSON object")
        return body

    def chat(self, messages: list[dict[str, str]], context: dict[str, str]) -> str:
        data = self._post("/api/chat", {"messages": messages, "context": context})
        try:
            return data["response"].strip()
        except (KeyError, AttributeError) as e:
            raise NetworkFailure("chat response missing 'response'") from e

    def feedback(self, history: str) -> str:
        data = self._post("/api/feedback", {"historyString": history})
        try:
            return data["feedback"].strip()
        except (KeyError, AttributeError) as e:
            raise NetworkFailure("feedback response missing 'feedback'") from e

    def health(self) -> dict[str, Any]:
        """Return the service health document (blocking)."""
        try:
            response = requests.get(f"{self.base_url}/api/health", timeout=10)
        except requests.exceptions.RequestException as e:
            raise NetworkFailure(f"could not reach {self.base_url}: {type(e).__name__}") from e
        return self._parse(response, "/api/health")
