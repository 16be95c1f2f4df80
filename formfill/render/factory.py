"""Factory for creating text rasterizer instances."""

from formfill.config import RasterizerBackend, get_settings
from formfill.render.base import BaseRasterizer, FontPolicy
from formfill.render.mupdf_rasterizer import MuPDFRasterizer
from formfill.render.pillow_rasterizer import PillowRasterizer


def create_rasterizer(
    backend: RasterizerBackend | str | None = None,
    policy: FontPolicy | None = None,
) -> BaseRasterizer:
    """Create a rasterizer instance for the given backend.

    Args:
        backend: Backend type (enum or string), defaults to the configured one
        policy: Font policy, defaults to one built from settings

    Returns:
        A fresh rasterizer; instances are not shared between fill operations

    Raises:
        ValueError: If backend type is unknown

    Example:
        rasterizer = create_rasterizer(RasterizerBackend.MUPDF)
        raster = rasterizer.render("করাতে", (364, 11))
    """
    settings = get_settings()

    if backend is None:
        backend = settings.rasterizer_backend
    elif isinstance(backend, str):
        backend = RasterizerBackend(backend.lower())

    policy = policy or FontPolicy.from_settings(settings)

    if backend == RasterizerBackend.PILLOW:
        return PillowRasterizer(policy)
    elif backend == RasterizerBackend.MUPDF:
        return MuPDFRasterizer(policy)
    else:
        raise ValueError(f"Unknown rasterizer backend: {backend}")
