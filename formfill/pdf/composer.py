"""Compose a filled form from the blank template.

Every text value is rasterized to a transparent PNG and drawn as an image
at its field's rectangle, so Bengali and Latin text render identically in
every viewer regardless of the template's fonts or NeedAppearances support.
Interactive widgets are then removed so their empty appearances cannot
cover the drawn text, and the photo and signature are placed at their
fixed boxes.

A fill is a strictly ordered pipeline:

    load -> text fields -> flatten -> photo -> signature -> serialize

Load and serialize failures abort the call. Every other step is
independent: a failure is recorded as a StepDiagnostic and the pipeline
continues without that field or image.
"""

import asyncio
import functools
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

import fitz  # PyMuPDF

from formfill.config import get_settings
from formfill.errors import DocumentSerializationError, TemplateLoadError
from formfill.images.models import AssetImage, ImageKind
from formfill.images.normalizer import normalize_asset
from formfill.images.validation import PHOTO_PROFILE, SIGNATURE_PROFILE, ImageProfile
from formfill.pdf.coordinates import FIELD_COORDS, FORM_FIELDS, PHOTO_BOX, SIGNATURE_BOX, FieldRect, FormField
from formfill.pdf.template import load_template
from formfill.render.base import BaseRasterizer, FontPolicy
from formfill.render.factory import create_rasterizer
from formfill.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# MuPDF keeps global state and must not be entered from two threads at once
_mupdf_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mupdf")


async def _run_mupdf(func: Callable[..., T], *args: Any) -> T:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_mupdf_executor, functools.partial(func, *args))


class ComposeStep(str, Enum):
    """Stages of the fill pipeline."""

    LOAD = "load"
    TEXT = "text"
    FLATTEN = "flatten"
    PHOTO = "photo"
    SIGNATURE = "signature"
    SERIALIZE = "serialize"


@dataclass
class StepDiagnostic:
    """Outcome of one pipeline step for one target.

    Attributes:
        step: Pipeline stage
        target: Field id, widget name, or asset name
        ok: Whether the step succeeded
        message: Failure reason or summary
    """

    step: ComposeStep
    target: str
    ok: bool
    message: str | None = None


@dataclass
class ComposeResult:
    """A filled document and what happened while building it."""

    pdf: bytes
    diagnostics: list[StepDiagnostic] = field(default_factory=list)

    @property
    def failures(self) -> list[StepDiagnostic]:
        return [d for d in self.diagnostics if not d.ok]

    @property
    def drawn_fields(self) -> list[str]:
        return [d.target for d in self.diagnostics if d.step == ComposeStep.TEXT and d.ok]


def to_page_rect(page: fitz.Page, rect: FieldRect) -> fitz.Rect:
    """Convert a bottom-left origin PDF rectangle to MuPDF page coordinates."""
    pdf_rect = fitz.Rect(rect.x, rect.y, rect.x + rect.w, rect.y + rect.h)
    return (pdf_rect * page.transformation_matrix).normalize()


def _open_document(template: bytes) -> fitz.Document:
    if not template:
        raise TemplateLoadError("Empty template provided")

    try:
        doc = fitz.open(stream=template, filetype="pdf")
    except Exception as e:
        raise TemplateLoadError(f"Failed to open template: {e}") from e

    if doc.needs_pass or doc.page_count == 0:
        doc.close()
        raise TemplateLoadError("Template is encrypted or has no pages")

    return doc


def _draw_text(page: fitz.Page, text: str, rect: FieldRect, rasterizer: BaseRasterizer) -> bool:
    raster = rasterizer.render(text, rect)
    if raster is None:
        return False
    page.insert_image(to_page_rect(page, rect), stream=raster.png, keep_proportion=False, overlay=True)
    return True


def _remove_widgets(doc: fitz.Document) -> tuple[int, list[tuple[str, str]]]:
    removed = 0
    failed: list[tuple[str, str]] = []
    for page in doc:
        widget = page.first_widget
        while widget:
            name = widget.field_name or f"page{page.number}-xref{widget.xref}"
            try:
                next_widget = page.delete_widget(widget)
                removed += 1
            except Exception as e:
                failed.append((name, str(e)))
                next_widget = widget.next
            widget = next_widget
    return removed, failed


def _insert_png(page: fitz.Page, rect: fitz.Rect, data: bytes) -> None:
    pixmap = fitz.Pixmap(data)
    page.insert_image(rect, pixmap=pixmap, keep_proportion=False, overlay=True)


def _insert_jpeg(page: fitz.Page, rect: fitz.Rect, data: bytes) -> None:
    # The DCT stream is embedded as-is
    page.insert_image(rect, stream=data, keep_proportion=False, overlay=True)


def _insert_asset(page: fitz.Page, asset: AssetImage, box: FieldRect) -> None:
    rect = to_page_rect(page, box)
    if asset.kind == ImageKind.PNG:
        _insert_png(page, rect, asset.data)
    else:
        _insert_jpeg(page, rect, asset.data)


def _serialize(doc: fitz.Document) -> bytes:
    try:
        return doc.tobytes(garbage=3, deflate=True)
    except Exception as e:
        raise DocumentSerializationError(f"Failed to write filled PDF: {e}") from e


class _Composition:
    """State of a single compose call."""

    def __init__(self, doc: fitz.Document, rasterizer: BaseRasterizer):
        self.doc = doc
        self.page = doc[0]
        self.rasterizer = rasterizer
        self.diagnostics: list[StepDiagnostic] = []

    def record(self, step: ComposeStep, target: str, ok: bool, message: str | None = None) -> None:
        self.diagnostics.append(StepDiagnostic(step, target, ok, message))
        if not ok:
            logger.warning(f"Skipped {step.value} step", target=target, reason=message)

    async def fill_text_fields(
        self,
        values: Mapping[str, str],
        form_fields: Sequence[FormField],
        coordinates: Mapping[str, FieldRect],
    ) -> None:
        for form_field in form_fields:
            value = values.get(form_field.id)
            if value is None or not str(value).strip():
                continue

            rect = coordinates.get(form_field.pdf_field_id)
            if rect is None:
                self.record(
                    ComposeStep.TEXT,
                    form_field.id,
                    False,
                    f"no position for template field {form_field.pdf_field_id}",
                )
                continue

            try:
                drawn = await _run_mupdf(_draw_text, self.page, str(value), rect, self.rasterizer)
            except Exception as e:
                self.record(ComposeStep.TEXT, form_field.id, False, str(e))
                continue

            if drawn:
                self.record(ComposeStep.TEXT, form_field.id, True)
            else:
                self.record(ComposeStep.TEXT, form_field.id, False, "rasterizer unavailable")

    async def flatten(self) -> None:
        removed, failed = await _run_mupdf(_remove_widgets, self.doc)
        for name, error in failed:
            self.record(ComposeStep.FLATTEN, name, False, error)
        self.record(ComposeStep.FLATTEN, "widgets", True, f"removed {removed}")

    async def embed_asset(
        self,
        step: ComposeStep,
        asset: AssetImage,
        profile: ImageProfile,
        box: FieldRect,
    ) -> None:
        try:
            normalized = await normalize_asset(asset, profile)
            await _run_mupdf(_insert_asset, self.page, normalized, box)
        except Exception as e:
            self.record(step, profile.name, False, str(e))
            return
        self.record(step, profile.name, True, normalized.kind.value)


async def compose(
    template: bytes,
    fields: Mapping[str, str],
    photo: AssetImage | None = None,
    signature: AssetImage | None = None,
    *,
    rasterizer: BaseRasterizer | None = None,
    font_policy: FontPolicy | None = None,
    flatten: bool | None = None,
    form_fields: Sequence[FormField] = FORM_FIELDS,
    coordinates: Mapping[str, FieldRect] = FIELD_COORDS,
    photo_box: FieldRect = PHOTO_BOX,
    signature_box: FieldRect = SIGNATURE_BOX,
) -> ComposeResult:
    """Fill the template with text, photo and signature.

    Args:
        template: Blank template PDF bytes
        fields: Field id to value; empty values are ignored
        photo: Optional passport photo
        signature: Optional signature image
        rasterizer: Text rasterizer, a fresh configured one by default
        font_policy: Font policy for the default rasterizer, ignored when
            rasterizer is given
        flatten: Remove interactive widgets, defaults to settings.flatten_fields
        form_fields: Field definitions to fill
        coordinates: Template field id to rectangle
        photo_box: Where the photo is drawn
        signature_box: Where the signature is drawn

    Returns:
        ComposeResult with the serialized PDF and per-step diagnostics

    Raises:
        TemplateLoadError: If the template cannot be opened
        DocumentSerializationError: If the filled PDF cannot be written

    Example:
        result = await compose(template, {"name_bn": "করাতে"})
        Path("filled.pdf").write_bytes(result.pdf)
    """
    settings = get_settings()
    if flatten is None:
        flatten = settings.flatten_fields
    if rasterizer is None:
        rasterizer = create_rasterizer(policy=font_policy)

    doc = await _run_mupdf(_open_document, template)
    try:
        composition = _Composition(doc, rasterizer)
        composition.record(ComposeStep.LOAD, "template", True)

        await composition.fill_text_fields(fields, form_fields, coordinates)

        if flatten:
            await composition.flatten()

        if photo is not None:
            await composition.embed_asset(ComposeStep.PHOTO, photo, PHOTO_PROFILE, photo_box)

        if signature is not None:
            await composition.embed_asset(ComposeStep.SIGNATURE, signature, SIGNATURE_PROFILE, signature_box)

        pdf = await _run_mupdf(_serialize, doc)
        composition.record(ComposeStep.SERIALIZE, "document", True)
    finally:
        await _run_mupdf(doc.close)

    result = ComposeResult(pdf=pdf, diagnostics=composition.diagnostics)
    logger.info(
        "Composed form",
        backend=rasterizer.backend_name,
        drawn_fields=len(result.drawn_fields),
        failures=len(result.failures),
        size=len(pdf),
    )
    return result


async def fill_form(
    values: Mapping[str, str],
    photo: AssetImage | None = None,
    signature: AssetImage | None = None,
    template_source: str | Path | None = None,
    **options: Any,
) -> ComposeResult:
    """Load the template and compose it.

    Args:
        values: Field id to value
        photo: Optional passport photo
        signature: Optional signature image
        template_source: Path or URL, defaults to settings.template_path
        **options: Passed on to compose()

    Raises:
        TemplateLoadError: If the template cannot be fetched or opened
        DocumentSerializationError: If the filled PDF cannot be written
    """
    template = await load_template(template_source)
    return await compose(template, values, photo, signature, **options)
