"""Prepare photos and signatures for embedding.

The normalizer checks that the bytes really are the declared encoding,
guards against decompression bombs, applies EXIF orientation and shrinks
oversized images to the profile's maximum. The encoding is never changed:
a PNG stays a PNG (with its alpha channel) and a JPEG stays a JPEG.
"""

import asyncio
import io

from PIL import Image, ImageOps

from formfill.config import get_settings
from formfill.errors import ImageNormalizationError
from formfill.images.models import AssetImage, ImageKind
from formfill.images.validation import ImageProfile
from formfill.utils.image_utils import detect_image_kind
from formfill.utils.logging import get_logger

logger = get_logger(__name__)

_EXIF_ORIENTATION = 0x0112

JPEG_QUALITY = 90


def _encode(image: Image.Image, kind: ImageKind) -> bytes:
    output = io.BytesIO()
    if kind == ImageKind.PNG:
        if image.mode not in ("1", "L", "LA", "P", "RGB", "RGBA"):
            image = image.convert("RGBA")
        image.save(output, format="PNG", optimize=True)
    else:
        if image.mode not in ("L", "RGB"):
            image = image.convert("RGB")
        image.save(output, format="JPEG", quality=JPEG_QUALITY)
    return output.getvalue()


def normalize_image(
    asset: AssetImage,
    profile: ImageProfile,
    max_pixels: int | None = None,
) -> AssetImage:
    """Bound an image to a profile without changing its encoding.

    Args:
        asset: Image as supplied by the user
        profile: Supplies the maximum width and height
        max_pixels: Decoded pixel count cap, defaults to settings

    Returns:
        The same asset if nothing needed changing, else a re-encoded copy

    Raises:
        ImageNormalizationError: If the data is not the declared encoding,
            is too large to decode safely, or cannot be decoded
    """
    if max_pixels is None:
        max_pixels = get_settings().max_image_pixels

    sniffed = detect_image_kind(asset.data)
    if sniffed is None:
        raise ImageNormalizationError("Image data is neither PNG nor JPEG", {"profile": profile.name})
    if sniffed != asset.kind.value:
        raise ImageNormalizationError(
            f"Image declared as {asset.kind.value} but contains {sniffed} data",
            {"profile": profile.name},
        )

    try:
        with Image.open(io.BytesIO(asset.data)) as image:
            pixels = image.width * image.height
            if pixels > max_pixels:
                raise ImageNormalizationError(
                    f"Image has too many pixels ({image.width}x{image.height})",
                    {"profile": profile.name, "max_pixels": max_pixels},
                )
            image.load()

            rotated = image.getexif().get(_EXIF_ORIENTATION, 1) != 1
            oversized = image.width > profile.max_width or image.height > profile.max_height
            if not rotated and not oversized:
                return asset

            result = ImageOps.exif_transpose(image) if rotated else image.copy()
            result.thumbnail((profile.max_width, profile.max_height), Image.Resampling.LANCZOS)
            data = _encode(result, asset.kind)
    except ImageNormalizationError:
        raise
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        raise ImageNormalizationError(f"Could not decode image: {e}", {"profile": profile.name}) from e

    logger.info(
        "Normalized image",
        profile=profile.name,
        kind=asset.kind.value,
        width=result.width,
        height=result.height,
    )
    return AssetImage(data=data, kind=asset.kind)


async def normalize_asset(asset: AssetImage, profile: ImageProfile) -> AssetImage:
    """Run normalize_image in a worker thread."""
    return await asyncio.to_thread(normalize_image, asset, profile)
