"""Counter error taxonomy — pure Python, no external dependencies."""

from __future__ import annotations


class CounterError(Exception):
    """Base error."""


class BackendUnavailable(CounterError):
    """Raised when the persistence backend cannot serve a request (I/O error, disconnect, timeout)."""


class ConnectionExhausted(CounterError):
    """Raised when every connection attempt at startup failed."""

    def __init__(self, attempts: int, last_error: BaseException | None = None):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Failed to connect to counter backend after {attempts} attempts: {last_error}"
        )


class SchemaInitError(CounterError):
    """Raised when the backend is reachable but its storage cannot be initialized."""


class MalformedState(CounterError):
    """Raised when stored counter content is not a non-negative decimal integer."""
