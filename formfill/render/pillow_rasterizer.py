"""Text rasterizer backed by Pillow.

Complex scripts are shaped by libraqm when Pillow was built with it.
Pillow bundles no Bengali glyphs: without complex_script_font_path (or a
font_path that covers Bengali) every Bengali code point draws as the same
missing-glyph box. The MuPDF backend, the default, has no such gap.
"""

import io
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont, features

from formfill.errors import RasterizationError
from formfill.render.base import BaseRasterizer, FontPolicy, RasterImage, needs_shaping, surface_size
from formfill.utils.logging import get_logger

logger = get_logger(__name__)

FontType = ImageFont.FreeTypeFont | ImageFont.ImageFont


class PillowRasterizer(BaseRasterizer):
    """Rasterize text with Pillow's ImageDraw."""

    def __init__(self, policy: FontPolicy | None = None):
        super().__init__(policy)
        self.layout_engine = (
            ImageFont.Layout.RAQM if features.check_feature("raqm") else ImageFont.Layout.BASIC
        )
        self._fonts: dict[tuple[str, int], FontType] = {}

    @property
    def backend_name(self) -> str:
        return "pillow"

    @property
    def can_shape(self) -> bool:
        """Whether complex scripts get proper glyph shaping."""
        return self.layout_engine == ImageFont.Layout.RAQM

    def _load_font(self, path: str, size: int) -> FontType:
        key = (path, size)
        if key in self._fonts:
            return self._fonts[key]

        font: FontType | None = None
        if path and Path(path).is_file():
            try:
                font = ImageFont.truetype(path, size=size, layout_engine=self.layout_engine)
            except OSError as e:
                logger.warning("Could not load font, using default", font=path, error=str(e))

        if font is None:
            font = ImageFont.load_default(size=size)

        self._fonts[key] = font
        return font

    def _draw(self, text: str, width: float, height: float, policy: FontPolicy) -> RasterImage:
        px_width, px_height = surface_size(width, height, policy.scale)
        font_px = max(1, round(height * policy.size_ratio * policy.scale))
        inset_px = policy.left_inset * policy.scale

        font_path = policy.font_for(text)
        if needs_shaping(text):
            if not (font_path and Path(font_path).is_file()):
                logger.warning(
                    "No font file for complex script, glyphs will be missing",
                    backend=self.backend_name,
                    font=font_path,
                )
            elif not self.can_shape:
                logger.debug("Pillow built without raqm, complex script left unshaped")

        try:
            image = Image.new("RGBA", (px_width, px_height), (0, 0, 0, 0))
        except (ValueError, MemoryError) as e:
            raise RasterizationError(
                f"Could not create {px_width}x{px_height} surface: {e}",
                {"backend": self.backend_name},
            ) from e

        draw = ImageDraw.Draw(image)
        font = self._load_font(font_path, font_px)

        if isinstance(font, ImageFont.FreeTypeFont):
            draw.text((inset_px, px_height / 2), text, font=font, fill=policy.color, anchor="lm")
        else:
            # Bitmap fonts do not support anchors
            _, top, _, bottom = draw.textbbox((0, 0), text, font=font)
            draw.text((inset_px, (px_height - (bottom - top)) / 2 - top), text, font=font, fill=policy.color)

        output = io.BytesIO()
        image.save(output, format="PNG")
        return RasterImage(png=output.getvalue(), width=px_width, height=px_height)
