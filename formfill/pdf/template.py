"""Fetch the blank form template.

The template is loaded fresh for every fill operation, from a local path
or from an http(s) URL.
"""

import asyncio
from pathlib import Path

import httpx

from formfill.config import get_settings
from formfill.errors import TemplateLoadError
from formfill.utils.logging import get_logger

logger = get_logger(__name__)

PDF_HEADER = b"%PDF-"


async def _fetch_remote(url: str, timeout: float) -> bytes:
    try:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.content
    except httpx.HTTPError as e:
        raise TemplateLoadError(f"Failed to fetch template: {e}", {"source": url}) from e


async def _read_local(path: Path) -> bytes:
    try:
        return await asyncio.to_thread(path.read_bytes)
    except OSError as e:
        raise TemplateLoadError(f"Failed to read template: {e}", {"source": str(path)}) from e


async def load_template(source: str | Path | None = None) -> bytes:
    """Load the PDF template.

    Args:
        source: Filesystem path or http(s) URL, defaults to settings.template_path

    Returns:
        Template PDF bytes

    Raises:
        TemplateLoadError: If the template cannot be fetched or is not a PDF
    """
    settings = get_settings()
    source = source if source is not None else settings.template_path
    source_str = str(source)

    if source_str.startswith(("http://", "https://")):
        content = await _fetch_remote(source_str, settings.template_fetch_timeout)
    else:
        content = await _read_local(Path(source_str))

    if not content:
        raise TemplateLoadError("Template is empty", {"source": source_str})
    if PDF_HEADER not in content[:1024]:
        raise TemplateLoadError("Template is not a PDF document", {"source": source_str})

    logger.debug("Loaded template", source=source_str, size=len(content))
    return content
