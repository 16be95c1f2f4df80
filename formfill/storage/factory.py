"""Factory for creating draft store instances."""

from formfill.config import DraftStoreBackend, get_settings
from formfill.storage.base import BaseDraftStore
from formfill.storage.memory import InMemoryDraftStore, JsonFileDraftStore


def create_draft_store(backend: DraftStoreBackend | str | None = None) -> BaseDraftStore:
    """Create a draft store for the given backend.

    Raises:
        ValueError: If backend type is unknown
    """
    settings = get_settings()

    if backend is None:
        backend = settings.draft_store_backend
    elif isinstance(backend, str):
        backend = DraftStoreBackend(backend.lower())

    if backend == DraftStoreBackend.MEMORY:
        return InMemoryDraftStore()
    elif backend == DraftStoreBackend.JSON_FILE:
        return JsonFileDraftStore(settings.draft_store_path)
    else:
        raise ValueError(f"Unknown draft store backend: {backend}")
