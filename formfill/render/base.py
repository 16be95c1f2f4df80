"""Base text rasterizer interface - Abstract class for all rendering backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from formfill.config import Settings, get_settings
from formfill.models import FieldRect
from formfill.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class RasterImage:
    """Text rendered to a transparent bitmap.

    Attributes:
        png: PNG encoded RGBA image
        width: Pixel width
        height: Pixel height
    """

    png: bytes
    width: int
    height: int

    def __post_init__(self) -> None:
        """Validate the raster."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Raster size must be positive, got {self.width}x{self.height}")


@dataclass(frozen=True)
class FontPolicy:
    """How text is sized and placed inside its box.

    Attributes:
        size_ratio: Font size as a fraction of the box height
        scale: Upscale factor of the backing surface
        left_inset: Horizontal text origin in points from the box's left edge
        color: CSS style text color
        font_path: Font file for Latin text
        complex_font_path: Font file for scripts that need shaping (Bengali)
    """

    size_ratio: float = 0.85
    scale: float = 4.0
    left_inset: float = 1.0
    color: str = "#000000"
    font_path: str = ""
    complex_font_path: str = ""

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "FontPolicy":
        settings = settings or get_settings()
        return cls(
            size_ratio=settings.font_size_ratio,
            scale=settings.raster_scale,
            left_inset=settings.text_left_inset,
            color=settings.text_color,
            font_path=settings.font_path,
            complex_font_path=settings.complex_script_font_path,
        )

    def font_for(self, text: str) -> str:
        """Pick the font file for a piece of text."""
        if self.complex_font_path and needs_shaping(text):
            return self.complex_font_path
        return self.font_path or self.complex_font_path


def needs_shaping(text: str) -> bool:
    """Check if text contains Indic code points (Devanagari to Malayalam)."""
    return any(0x0900 <= ord(ch) <= 0x0D7F for ch in text)


def surface_size(width: float, height: float, scale: float) -> tuple[int, int]:
    """Pixel size of the backing surface for a box of width x height points."""
    return max(1, round(width * scale)), max(1, round(height * scale))


class BaseRasterizer(ABC):
    """Abstract base class for text rasterizers.

    A rasterizer turns a string into a transparent image sized to a field
    box, so that the text can be drawn on the page as a picture instead of
    depending on fonts embedded in the template. Glyph shaping is left to
    the backend.

    Example:
        class MyRasterizer(BaseRasterizer):
            def _draw(self, text, width, height, policy) -> RasterImage:
                ...

    Subclasses may raise any exception from _draw; render() turns it into
    an "unavailable" result.
    """

    def __init__(self, policy: FontPolicy | None = None):
        self.policy = policy or FontPolicy.from_settings()

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Return the name of the rendering backend."""
        pass

    @abstractmethod
    def _draw(self, text: str, width: float, height: float, policy: FontPolicy) -> RasterImage:
        """Draw text into a box of width x height points.

        Raises:
            RasterizationError: If the surface cannot be created
        """
        pass

    def render(
        self,
        text: str,
        box: FieldRect | tuple[float, float],
        policy: FontPolicy | None = None,
    ) -> RasterImage | None:
        """Render text to a raster sized to box.

        Args:
            text: Text to draw, any script
            box: Target rectangle (only its size is used) or (width, height)
            policy: Overrides the rasterizer's font policy

        Returns:
            RasterImage, or None if the surface could not be created
        """
        policy = policy or self.policy
        width, height = box.size if isinstance(box, FieldRect) else box

        if not text.strip():
            return None
        if width <= 0 or height <= 0:
            logger.warning("Cannot rasterize into empty box", width=width, height=height)
            return None

        try:
            return self._draw(text, width, height, policy)
        except Exception as e:
            logger.warning(
                "Rasterizer surface unavailable",
                backend=self.backend_name,
                error=str(e),
            )
            return None
