"""Pytest configuration and fixtures."""

import io
from pathlib import Path

import fitz  # PyMuPDF
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from formfill.config import get_settings
from formfill.images.models import AssetImage, ImageKind
from formfill.pdf.composer import to_page_rect
from formfill.pdf.coordinates import FIELD_COORDS, FORM_FIELDS
from formfill.render.base import BaseRasterizer, FontPolicy, RasterImage
from formfill.render.pillow_rasterizer import PillowRasterizer

ASSETS_DIR = Path(__file__).parent.parent / "assets"


def make_image(size: tuple[int, int], fmt: str = "PNG", mode: str = "RGB", **save_args) -> bytes:
    """Encode a solid image of the given size."""
    color = (200, 30, 30, 128) if mode == "RGBA" else (200, 30, 30)
    image = Image.new(mode, size, color[: len(mode)])
    output = io.BytesIO()
    image.save(output, format=fmt, **save_args)
    return output.getvalue()


def build_template(coordinates=FIELD_COORDS, names=None) -> bytes:
    """Create an A4 PDF with one text widget per coordinate table entry."""
    doc = fitz.open()
    page = doc.new_page(width=595, height=842)
    for name, rect in coordinates.items():
        if names is not None and name not in names:
            continue
        widget = fitz.Widget()
        widget.field_name = name
        widget.field_type = fitz.PDF_WIDGET_TYPE_TEXT
        widget.rect = to_page_rect(page, rect)
        page.add_widget(widget)
    data = doc.tobytes()
    doc.close()
    return data


class FailingRasterizer(BaseRasterizer):
    """Rasterizer whose surface can never be created."""

    @property
    def backend_name(self) -> str:
        return "failing"

    def _draw(self, text: str, width: float, height: float, policy: FontPolicy) -> RasterImage:
        raise MemoryError("no surface")


@pytest.fixture
def template_bytes():
    """Template with a widget for every positioned field."""
    return build_template()


@pytest.fixture
def name_bn_template():
    """Template with only the Bangla name field."""
    return build_template(names={"Name_Bangla"})


@pytest.fixture
def rasterizer():
    """Pillow rasterizer with default fonts."""
    return PillowRasterizer(FontPolicy())


@pytest.fixture
def png_photo():
    """300x360 PNG photo with transparency."""
    return AssetImage(make_image((300, 360), "PNG", "RGBA"), ImageKind.PNG)


@pytest.fixture
def jpeg_photo():
    """300x360 JPEG photo."""
    return AssetImage(make_image((300, 360), "JPEG"), ImageKind.JPEG)


@pytest.fixture
def png_signature():
    """400x150 PNG signature."""
    return AssetImage(make_image((400, 150), "PNG", "RGBA"), ImageKind.PNG)


@pytest.fixture
def template_file(tmp_path, template_bytes):
    """Template written to disk."""
    path = tmp_path / "blank-form.pdf"
    path.write_bytes(template_bytes)
    return path


@pytest.fixture
def settings_env(monkeypatch, template_file):
    """Point settings at the test template."""
    monkeypatch.setenv("FORMFILL_TEMPLATE_PATH", str(template_file))
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def draft_store():
    """Empty in-memory draft store."""
    from formfill.storage import InMemoryDraftStore

    return InMemoryDraftStore()


@pytest.fixture
def client(settings_env, draft_store):
    """Create a test client for the FastAPI app."""
    from formfill.api.router import get_draft_store
    from formfill.main import app

    app.dependency_overrides[get_draft_store] = lambda: draft_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def image_factory():
    """make_image, for tests that need specific sizes or formats."""
    return make_image


@pytest.fixture
def template_factory():
    """build_template, for tests that need a custom widget layout."""
    return build_template


@pytest.fixture
def failing_rasterizer():
    return FailingRasterizer(FontPolicy())
