"""Exception types for MockingBird."""


class MockingbirdError(Exception):
    """Base class for MockingBird errors."""


class InvalidInput(MockingbirdError):
    """Raised when an edit would put the text buffer in an invalid state."""


class NetworkFailure(MockingbirdError):
    """Raised when a call to the interviewer service did not complete."""


class RateLimitExceeded(NetworkFailure):
    """Raised when the interviewer service answers HTTP 429."""

    def __init__(self, message: str, retry_after: int | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after  # milliseconds, as reported by the service


class ConfigurationError(MockingbirdError):
    """Raised when the interviewer service is unreachable by configuration or rejects our credential."""
