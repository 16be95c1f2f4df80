"""Image handling package - Validation and normalization of user images."""

from formfill.images.models import AssetImage, ImageDimensions, ImageKind, ValidationResult
from formfill.images.normalizer import normalize_asset, normalize_image
from formfill.images.validation import (
    PHOTO_PROFILE,
    SIGNATURE_PROFILE,
    ImageProfile,
    get_profile,
    validate_image,
)

__all__ = [
    "AssetImage",
    "ImageDimensions",
    "ImageKind",
    "ImageProfile",
    "PHOTO_PROFILE",
    "SIGNATURE_PROFILE",
    "ValidationResult",
    "get_profile",
    "normalize_asset",
    "normalize_image",
    "validate_image",
]
