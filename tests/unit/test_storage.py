"""Unit tests for draft storage."""

import pytest

from formfill.config import DraftStoreBackend
from formfill.storage import (
    InMemoryDraftStore,
    JsonFileDraftStore,
    clear_draft,
    create_draft_store,
    load_draft,
    save_draft,
)
from formfill.storage.drafts import FORM_DATA_KEY, PHOTO_KEY


class TestStores:
    """Tests for the key-value backends."""

    @pytest.fixture(params=["memory", "json_file"])
    def store(self, request, tmp_path):
        if request.param == "memory":
            return InMemoryDraftStore()
        return JsonFileDraftStore(tmp_path / "drafts.json")

    def test_save_load_clear(self, store):
        store.save("key", "value")
        assert store.load("key") == "value"

        store.clear("key")
        assert store.load("key") is None

    def test_missing_key(self, store):
        assert store.load("missing") is None
        store.clear("missing")

    def test_overwrite(self, store):
        store.save("key", "one")
        store.save("key", "two")

        assert store.load("key") == "two"

    def test_json_store_persists(self, tmp_path):
        """Test that a new store instance sees earlier saves."""
        path = tmp_path / "nested" / "drafts.json"
        JsonFileDraftStore(path).save("name", "করাতে")

        assert JsonFileDraftStore(path).load("name") == "করাতে"

    def test_json_store_corrupt_file(self, tmp_path):
        path = tmp_path / "drafts.json"
        path.write_text("{not json", encoding="utf-8")

        store = JsonFileDraftStore(path)

        assert store.load("name") is None
        store.save("name", "Rahim")
        assert store.load("name") == "Rahim"


class TestDrafts:
    """Tests for whole-form drafts."""

    def test_round_trip(self, draft_store, png_photo, jpeg_photo):
        values = {"name_bn": "করাতে", "name_en": "Rahim"}

        save_draft(draft_store, values, png_photo, jpeg_photo)
        draft = load_draft(draft_store)

        assert draft.values == values
        assert draft.photo == png_photo
        assert draft.signature == jpeg_photo

    def test_images_stored_as_data_urls(self, draft_store, png_photo):
        save_draft(draft_store, {}, png_photo)

        assert draft_store.load(PHOTO_KEY).startswith("data:image/png;base64,")

    def test_missing_images_keep_previous(self, draft_store, png_photo):
        """Test that saving values alone leaves the stored photo alone."""
        save_draft(draft_store, {"name_en": "Rahim"}, png_photo)
        save_draft(draft_store, {"name_en": "Karim"})

        draft = load_draft(draft_store)
        assert draft.values == {"name_en": "Karim"}
        assert draft.photo == png_photo

    def test_empty_store(self, draft_store):
        draft = load_draft(draft_store)

        assert draft.values == {}
        assert draft.photo is None
        assert draft.signature is None

    def test_corrupt_values(self, draft_store):
        draft_store.save(FORM_DATA_KEY, "{oops")

        assert load_draft(draft_store).values == {}

    def test_corrupt_image(self, draft_store):
        draft_store.save(PHOTO_KEY, "not a data url")

        assert load_draft(draft_store).photo is None

    def test_clear(self, draft_store, png_photo):
        save_draft(draft_store, {"name_en": "Rahim"}, png_photo, png_photo)

        clear_draft(draft_store)

        draft = load_draft(draft_store)
        assert draft.values == {}
        assert draft.photo is None
        assert draft.signature is None


class TestDraftStoreFactory:
    """Tests for create_draft_store."""

    def test_memory(self):
        assert isinstance(create_draft_store(DraftStoreBackend.MEMORY), InMemoryDraftStore)

    def test_json_file_from_string(self):
        assert isinstance(create_draft_store("json_file"), JsonFileDraftStore)

    def test_unknown(self):
        with pytest.raises(ValueError):
            create_draft_store("redis")
