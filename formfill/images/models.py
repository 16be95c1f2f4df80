"""Image asset and validation result types."""

from dataclasses import dataclass, field
from enum import Enum

from formfill.utils.image_utils import bytes_to_data_url, data_url_to_bytes, detect_image_kind


class ImageKind(str, Enum):
    """Image encodings that can be embedded in the form."""

    PNG = "png"
    JPEG = "jpeg"

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"

    @classmethod
    def from_mime(cls, mime_type: str | None) -> "ImageKind | None":
        """Map a MIME type to an image kind, None if unsupported."""
        mime = (mime_type or "").lower().strip()
        if mime == "image/png":
            return cls.PNG
        if mime in ("image/jpeg", "image/jpg"):
            return cls.JPEG
        return None


@dataclass(frozen=True)
class AssetImage:
    """A user supplied photo or signature.

    Attributes:
        data: Encoded image bytes
        kind: Encoding of data
    """

    data: bytes
    kind: ImageKind

    @classmethod
    def from_upload(cls, data: bytes, mime_hint: str | None = None) -> "AssetImage":
        """Build an asset from uploaded bytes, trusting the hint over sniffing.

        Raises:
            ValueError: If neither the hint nor the content is PNG or JPEG
        """
        kind = ImageKind.from_mime(mime_hint)
        if kind is None:
            sniffed = detect_image_kind(data)
            if sniffed is None:
                raise ValueError(f"Unsupported image type: {mime_hint or 'unknown'}")
            kind = ImageKind(sniffed)
        return cls(data=data, kind=kind)

    @classmethod
    def from_data_url(cls, data_url: str) -> "AssetImage":
        """Build an asset from a base64 data URL.

        Anything not declared as image/png is treated as JPEG.
        """
        header = data_url.split(",", 1)[0].lower()
        kind = ImageKind.PNG if "image/png" in header else ImageKind.JPEG
        return cls(data=data_url_to_bytes(data_url), kind=kind)

    def to_data_url(self) -> str:
        return bytes_to_data_url(self.data, self.kind.mime_type)


@dataclass(frozen=True)
class ImageDimensions:
    """Pixel size of a decoded image."""

    width: int
    height: int

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


@dataclass
class ValidationResult:
    """Outcome of pre-flight checks on an uploaded image.

    Attributes:
        valid: False if any hard error was found
        errors: Problems that block using the image
        warnings: Advisory notes, image still usable
        dimensions: Pixel size, None if the image could not be decoded
    """

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    dimensions: ImageDimensions | None = None
