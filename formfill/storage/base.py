"""Base draft store interface - Abstract key-value persistence."""

from abc import ABC, abstractmethod


class BaseDraftStore(ABC):
    """Abstract key-value store holding form drafts.

    The composer never uses a store. Callers that want to resume a session
    save the last form values and images here and rebuild FormValues and
    AssetImage objects from what they load.

    Example:
        class MyStore(BaseDraftStore):
            def save(self, key: str, value: str) -> None: ...
            def load(self, key: str) -> str | None: ...
            def clear(self, key: str) -> None: ...
    """

    @abstractmethod
    def save(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    def load(self, key: str) -> str | None:
        """Return the value stored under key, None if there is none."""
        pass

    @abstractmethod
    def clear(self, key: str) -> None:
        """Remove key; removing a missing key is not an error."""
        pass
