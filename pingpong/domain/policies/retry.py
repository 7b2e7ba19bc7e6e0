"""RetryPolicy — bounded fixed-delay retry schedule for backend connection."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MAX_ATTEMPTS = 30
DEFAULT_DELAY_SECONDS = 2.0


@dataclass(frozen=True)
class RetryPolicy:
    """Fixed-delay retry schedule.

    Attempts are numbered from 1. After a failed attempt *n* the caller waits
    ``delay_after(n)`` seconds; ``None`` means the budget is spent and no
    further attempt should be made.
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    delay_seconds: float = DEFAULT_DELAY_SECONDS

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay_seconds < 0:
            raise ValueError("delay_seconds must not be negative")

    def attempts(self) -> range:
        return range(1, self.max_attempts + 1)

    def delay_after(self, attempt: int) -> float | None:
        if attempt >= self.max_attempts:
            return None
        return self.delay_seconds
