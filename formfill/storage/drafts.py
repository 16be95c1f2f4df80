"""Save and restore a whole form draft through a draft store."""

import json
from dataclasses import dataclass, field

from formfill.images.models import AssetImage
from formfill.storage.base import BaseDraftStore
from formfill.utils.logging import get_logger

logger = get_logger(__name__)

FORM_DATA_KEY = "hstu_karate_form_data"
PHOTO_KEY = "hstu_karate_photo"
SIGNATURE_KEY = "hstu_karate_signature"


@dataclass
class Draft:
    """Form values and images restored from a store."""

    values: dict[str, str] = field(default_factory=dict)
    photo: AssetImage | None = None
    signature: AssetImage | None = None


def save_draft(
    store: BaseDraftStore,
    values: dict[str, str],
    photo: AssetImage | None = None,
    signature: AssetImage | None = None,
) -> None:
    """Store form values, and the images that are given, as a draft.

    Images that are not given keep whatever the store already holds.
    """
    store.save(FORM_DATA_KEY, json.dumps(values, ensure_ascii=False))
    if photo is not None:
        store.save(PHOTO_KEY, photo.to_data_url())
    if signature is not None:
        store.save(SIGNATURE_KEY, signature.to_data_url())


def _load_image(store: BaseDraftStore, key: str) -> AssetImage | None:
    data_url = store.load(key)
    if not data_url:
        return None
    try:
        return AssetImage.from_data_url(data_url)
    except ValueError as e:
        logger.warning("Discarding unreadable draft image", key=key, error=str(e))
        return None


def load_draft(store: BaseDraftStore) -> Draft:
    """Restore the saved draft; corrupt entries load as empty."""
    values: dict[str, str] = {}
    raw = store.load(FORM_DATA_KEY)
    if raw:
        try:
            loaded = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Discarding unreadable draft values", error=str(e))
        else:
            if isinstance(loaded, dict):
                values = {str(k): str(v) for k, v in loaded.items() if v is not None}

    return Draft(
        values=values,
        photo=_load_image(store, PHOTO_KEY),
        signature=_load_image(store, SIGNATURE_KEY),
    )


def clear_draft(store: BaseDraftStore) -> None:
    for key in (FORM_DATA_KEY, PHOTO_KEY, SIGNATURE_KEY):
        store.clear(key)
