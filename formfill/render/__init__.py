"""Text rasterization package - Abstract base and backend implementations."""

from formfill.render.base import BaseRasterizer, FontPolicy, RasterImage
from formfill.render.factory import create_rasterizer
from formfill.render.mupdf_rasterizer import MuPDFRasterizer
from formfill.render.pillow_rasterizer import PillowRasterizer

__all__ = [
    "BaseRasterizer",
    "FontPolicy",
    "RasterImage",
    "PillowRasterizer",
    "MuPDFRasterizer",
    "create_rasterizer",
]
