"""Image byte helpers.

Drafts keep photos and signatures as base64 data URLs, the format browsers
produce when reading an uploaded file. These helpers convert between data
URLs and raw bytes and sniff the real encoding from magic bytes.
"""

import base64
import binascii

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"


def detect_image_kind(data: bytes) -> str | None:
    """Identify PNG or JPEG data by its leading bytes.

    Args:
        data: Encoded image bytes

    Returns:
        "png", "jpeg", or None for anything else
    """
    if data.startswith(PNG_SIGNATURE):
        return "png"
    if data.startswith(JPEG_SIGNATURE):
        return "jpeg"
    return None


def data_url_to_bytes(data_url: str) -> bytes:
    """Decode the payload of a base64 data URL.

    Args:
        data_url: String like "data:image/png;base64,iVBORw0..."

    Returns:
        Decoded bytes

    Raises:
        ValueError: If the string is not a base64 data URL
    """
    header, sep, payload = data_url.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Not a base64 data URL")

    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


def bytes_to_data_url(data: bytes, mime_type: str) -> str:
    """Encode bytes as a base64 data URL."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"
