"""Text rasterizer backed by PyMuPDF's HTML text layout.

MuPDF shapes text with HarfBuzz and falls back to its bundled Noto fonts
for scripts the configured font does not cover, so Bengali renders
correctly without any system font configuration.
"""

import html
from pathlib import Path

import fitz  # PyMuPDF

from formfill.errors import RasterizationError
from formfill.render.base import BaseRasterizer, FontPolicy, RasterImage
from formfill.utils.logging import get_logger

logger = get_logger(__name__)

# Scratch height used to measure the laid out line, in multiples of the box height
_MEASURE_FACTOR = 4


class MuPDFRasterizer(BaseRasterizer):
    """Rasterize text by laying it out on a scratch PDF page."""

    @property
    def backend_name(self) -> str:
        return "mupdf"

    def _css(self, font_size: float, policy: FontPolicy, font_file: str | None) -> str:
        css = (
            f"* {{font-size: {font_size:.2f}px; color: {policy.color}; "
            "margin: 0; padding: 0; white-space: nowrap;"
        )
        if font_file:
            return (
                f"@font-face {{font-family: formfill; src: url({font_file});}}\n"
                f"{css} font-family: formfill;}}"
            )
        return f"{css} font-family: sans-serif;}}"

    def _draw(self, text: str, width: float, height: float, policy: FontPolicy) -> RasterImage:
        font_size = height * policy.size_ratio
        font = policy.font_for(text)
        archive = None
        font_file = None
        if font and Path(font).is_file():
            archive = fitz.Archive(str(Path(font).parent))
            font_file = Path(font).name

        css = self._css(font_size, policy, font_file)
        body = html.escape(text)
        # Wide enough that a single line never wraps; the page clips the rest
        line_width = max(width, font_size * len(text)) * 2

        doc = fitz.open()
        try:
            scratch = doc.new_page(width=line_width, height=height * _MEASURE_FACTOR)
            spare, _ = scratch.insert_htmlbox(
                scratch.rect, body, css=css, archive=archive, scale_low=1
            )
            if spare < 0:
                raise RasterizationError("Text does not fit the measuring box", {"backend": self.backend_name})
            line_height = scratch.rect.height - spare

            page = doc.new_page(width=width, height=height)
            top = (height - line_height) / 2
            box = fitz.Rect(policy.left_inset, top, policy.left_inset + line_width, top + line_height + 1)
            page.insert_htmlbox(box, body, css=css, archive=archive, scale_low=1)

            pix = page.get_pixmap(matrix=fitz.Matrix(policy.scale, policy.scale), alpha=True)
            return RasterImage(png=pix.tobytes("png"), width=pix.width, height=pix.height)
        finally:
            doc.close()
