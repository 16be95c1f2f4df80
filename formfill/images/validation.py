"""Pre-flight checks for uploaded photos and signatures.

Validation never touches a document. Problems that make an image unusable
are reported as errors, problems the pipeline can cope with (the image is
larger than needed, or oddly shaped) as warnings.
"""

import asyncio
import io
from dataclasses import dataclass

from PIL import Image

from formfill.config import get_settings
from formfill.images.models import ImageDimensions, ValidationResult
from formfill.utils.logging import get_logger

logger = get_logger(__name__)

ACCEPTED_TYPES = ("image/jpeg", "image/png", "image/jpg")


@dataclass(frozen=True)
class ImageProfile:
    """Constraints for one kind of uploaded image."""

    name: str
    max_size_bytes: int
    min_width: int
    min_height: int
    max_width: int
    max_height: int
    recommended_width: int
    recommended_height: int
    aspect_ratio_min: float
    aspect_ratio_max: float
    recommended_orientation: str
    recommended_ratio: float
    accepted_types: tuple[str, ...] = ACCEPTED_TYPES

    @property
    def max_size_mb(self) -> float:
        return self.max_size_bytes / 1024 / 1024


PHOTO_PROFILE = ImageProfile(
    name="photo",
    max_size_bytes=5 * 1024 * 1024,
    min_width=150,
    min_height=180,
    max_width=2000,
    max_height=2400,
    recommended_width=300,
    recommended_height=360,
    aspect_ratio_min=0.6,
    aspect_ratio_max=1.0,
    recommended_orientation="portrait",
    recommended_ratio=0.75,
)

SIGNATURE_PROFILE = ImageProfile(
    name="signature",
    max_size_bytes=2 * 1024 * 1024,
    min_width=50,
    min_height=20,
    max_width=2000,
    max_height=1000,
    recommended_width=400,
    recommended_height=150,
    aspect_ratio_min=0.5,
    aspect_ratio_max=8.0,
    recommended_orientation="landscape",
    recommended_ratio=2.5,
)

PROFILES = {profile.name: profile for profile in (PHOTO_PROFILE, SIGNATURE_PROFILE)}


def get_profile(name: str) -> ImageProfile:
    """Get a built-in profile by name.

    Raises:
        KeyError: If no profile has that name
    """
    try:
        return PROFILES[name.lower()]
    except KeyError:
        raise KeyError(f"Unknown image profile: {name}") from None


def read_dimensions(data: bytes, max_pixels: int | None = None) -> ImageDimensions | None:
    """Decode an image fully and return its size, None if it cannot be decoded.

    Images with more than max_pixels pixels are measured from the header
    only and never decoded.
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            if max_pixels is None or image.width * image.height <= max_pixels:
                image.load()
            return ImageDimensions(width=image.width, height=image.height)
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        logger.debug("Image decode failed", error=str(e))
        return None


async def validate_image(
    data: bytes,
    mime_hint: str | None,
    profile: ImageProfile | str,
    max_pixels: int | None = None,
) -> ValidationResult:
    """Check an uploaded image against a profile.

    Args:
        data: Raw uploaded bytes
        mime_hint: MIME type reported by the client
        profile: ImageProfile or the name of a built-in one
        max_pixels: Largest pixel count that can be embedded, defaults to settings

    Returns:
        ValidationResult; decoding failures are reported as errors, not raised
    """
    if isinstance(profile, str):
        profile = get_profile(profile)

    errors: list[str] = []
    warnings: list[str] = []

    mime = (mime_hint or "").lower()
    if mime not in profile.accepted_types:
        errors.append(f"Invalid file type: {mime or 'unknown'}. Please upload a JPG or PNG image.")

    if len(data) > profile.max_size_bytes:
        errors.append(
            f"File size ({len(data) / 1024 / 1024:.1f}MB) exceeds the maximum of "
            f"{profile.max_size_mb:g}MB."
        )

    if max_pixels is None:
        max_pixels = get_settings().max_image_pixels

    dimensions = await asyncio.to_thread(read_dimensions, data, max_pixels)
    if dimensions is None:
        errors.append("Could not read image file. It may be corrupted.")
        return ValidationResult(valid=False, errors=errors, warnings=warnings)

    width, height = dimensions.width, dimensions.height

    if width * height > max_pixels:
        errors.append(
            f"Image has too many pixels ({width}×{height}px). "
            f"Maximum: {max_pixels:,} pixels."
        )

    if width < profile.min_width or height < profile.min_height:
        errors.append(
            f"Image is too small ({width}×{height}px). "
            f"Minimum size: {profile.min_width}×{profile.min_height}px."
        )

    if width > profile.max_width or height > profile.max_height:
        warnings.append(
            f"Image is very large ({width}×{height}px). It will be resized. "
            f"Recommended: {profile.recommended_width}×{profile.recommended_height}px."
        )

    ratio = dimensions.aspect_ratio
    if ratio < profile.aspect_ratio_min or ratio > profile.aspect_ratio_max:
        warnings.append(
            f"Image aspect ratio ({ratio:.2f}) is unusual for a {profile.name}. "
            f"A {profile.recommended_orientation} orientation "
            f"(ratio ~{profile.recommended_ratio:g}) is recommended."
        )

    logger.debug(
        "Validated image",
        profile=profile.name,
        errors=len(errors),
        warnings=len(warnings),
    )

    return ValidationResult(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        dimensions=dimensions,
    )
