"""Port interface for counter persistence."""

from abc import ABC, abstractmethod


class CounterBackend(ABC):
    """Durable store for the single counter value.

    Implementations translate their driver errors into BackendUnavailable.
    They are not required to be safe for concurrent use: the caller
    serializes access.
    """

    @abstractmethod
    async def ping(self) -> None:
        """Lightweight round-trip probe. Raises BackendUnavailable on failure."""
        ...

    @abstractmethod
    async def ensure_schema(self) -> None:
        """Create storage if absent and insert the initial value 0 if absent.

        An existing value is left unchanged.
        """
        ...

    @abstractmethod
    async def read(self) -> int:
        """Return the committed counter value."""
        ...

    @abstractmethod
    async def increment_and_return(self) -> int:
        """Increment the counter by one and return the OLD value (before increment)."""
        ...

    @abstractmethod
    async def close(self) -> None:
        ...
