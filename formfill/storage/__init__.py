"""Draft storage package - Key-value persistence for form drafts."""

from formfill.storage.base import BaseDraftStore
from formfill.storage.drafts import Draft, clear_draft, load_draft, save_draft
from formfill.storage.factory import create_draft_store
from formfill.storage.memory import InMemoryDraftStore, JsonFileDraftStore

__all__ = [
    "BaseDraftStore",
    "Draft",
    "InMemoryDraftStore",
    "JsonFileDraftStore",
    "clear_draft",
    "create_draft_store",
    "load_draft",
    "save_draft",
]
