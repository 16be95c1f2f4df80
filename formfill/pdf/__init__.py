"""PDF package - Field layout, template loading and form composition."""

from formfill.pdf.composer import ComposeResult, ComposeStep, StepDiagnostic, compose, fill_form
from formfill.pdf.coordinates import FIELD_COORDS, FORM_FIELDS, FieldRect, FormField, lookup
from formfill.pdf.fields import get_template_fields, verify_coordinates
from formfill.pdf.template import load_template

__all__ = [
    "ComposeResult",
    "ComposeStep",
    "StepDiagnostic",
    "compose",
    "fill_form",
    "FIELD_COORDS",
    "FORM_FIELDS",
    "FieldRect",
    "FormField",
    "lookup",
    "get_template_fields",
    "verify_coordinates",
    "load_template",
]
