"""Inspect the AcroForm fields of a template.

The coordinate table is written by hand against the template. These
helpers read the template's widgets so the two can be checked against
each other whenever the template changes.
"""

import io
from collections.abc import Mapping
from dataclasses import dataclass

from pypdf import PdfReader

from formfill.errors import TemplateInspectionError
from formfill.pdf.coordinates import FIELD_COORDS, FieldRect
from formfill.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class TemplateField:
    """A form field found in the template.

    Attributes:
        name: Fully qualified field name
        field_type: Type of field (text, checkbox, radio, etc.)
        rect: Widget rectangle on the first page, None if not on it
    """

    name: str
    field_type: str
    rect: FieldRect | None = None


def _get_field_type(field_obj: Mapping) -> str:
    ft = field_obj.get("/FT", "")

    if ft == "/Tx":
        return "text"
    elif ft == "/Btn":
        if field_obj.get("/Ff", 0) & (1 << 15):  # Radio flag
            return "radio"
        return "checkbox"
    elif ft == "/Ch":
        return "choice"
    elif ft == "/Sig":
        return "signature"

    return "unknown"


def _widget_rects(reader: PdfReader) -> dict[str, FieldRect]:
    rects: dict[str, FieldRect] = {}
    page = reader.pages[0]
    for annot_ref in page.get("/Annots") or []:
        annot = annot_ref.get_object()
        if annot.get("/Subtype") != "/Widget":
            continue

        name = annot.get("/T")
        if name is None and "/Parent" in annot:
            name = annot["/Parent"].get_object().get("/T")
        if name is None or "/Rect" not in annot:
            continue

        x0, y0, x1, y1 = (float(v) for v in annot["/Rect"])
        rects[str(name)] = FieldRect(min(x0, x1), min(y0, y1), abs(x1 - x0), abs(y1 - y0))
    return rects


def get_template_fields(template: bytes) -> list[TemplateField]:
    """List the form fields of a template.

    Args:
        template: Template PDF bytes

    Returns:
        List of TemplateField objects, empty if the PDF has no form

    Raises:
        TemplateInspectionError: If the PDF cannot be read
    """
    try:
        reader = PdfReader(io.BytesIO(template))
        pdf_fields = reader.get_fields() or {}
        rects = _widget_rects(reader) if reader.pages else {}
    except Exception as e:
        logger.error("Failed to read template fields", error=str(e))
        raise TemplateInspectionError(f"Failed to read template form: {e}") from e

    fields = [
        TemplateField(name=name, field_type=_get_field_type(obj), rect=rects.get(name))
        for name, obj in pdf_fields.items()
    ]
    logger.info("Read template fields", field_count=len(fields))
    return fields


def _close(a: FieldRect, b: FieldRect, tolerance: float) -> bool:
    return all(
        abs(p - q) <= tolerance for p, q in zip((a.x, a.y, a.w, a.h), (b.x, b.y, b.w, b.h))
    )


def verify_coordinates(
    template: bytes,
    coordinates: Mapping[str, FieldRect] = FIELD_COORDS,
    tolerance: float = 1.0,
) -> list[str]:
    """Compare the coordinate table with the template's widgets.

    Args:
        template: Template PDF bytes
        coordinates: Table to check
        tolerance: Allowed difference per edge, in points

    Returns:
        One message per mismatched entry, empty if the table matches
    """
    found = {f.name: f for f in get_template_fields(template)}
    problems = []

    for name, expected in coordinates.items():
        template_field = found.get(name)
        if template_field is None or template_field.rect is None:
            problems.append(f"{name}: not found on the template's first page")
        elif not _close(template_field.rect, expected, tolerance):
            actual = template_field.rect
            problems.append(
                f"{name}: table has ({expected.x}, {expected.y}, {expected.w}, {expected.h}), "
                f"template has ({actual.x:.1f}, {actual.y:.1f}, {actual.w:.1f}, {actual.h:.1f})"
            )

    if problems:
        logger.warning("Coordinate table does not match template", mismatches=len(problems))
    return problems
