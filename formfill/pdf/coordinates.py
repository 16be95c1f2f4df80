"""Static field layout of the admission form template.

All rectangles are in PDF page space of the template's first page
(points, origin at the bottom-left corner). The template is an A4 page
(595 x 842 pt).
"""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from formfill.models import FieldRect, FormField

FORM_FIELDS: tuple[FormField, ...] = (
    FormField("name_bn", "Name_Bangla", "Name (Bangla)"),
    FormField("name_en", "Name_English", "Name (English, block letters)"),
    FormField("father_name", "Father_Name", "Father's name"),
    FormField("mother_name", "Mother_Name", "Mother's name"),
    FormField("student_id", "Student_ID", "Student ID"),
    FormField("department", "Department", "Department"),
    FormField("level_semester", "Level_Semester", "Level / Semester"),
    FormField("session", "Session", "Session"),
    FormField("date_of_birth", "Date_of_Birth", "Date of birth"),
    FormField("blood_group", "Blood_Group", "Blood group"),
    FormField("mobile", "Mobile", "Mobile number"),
    FormField("email", "Email", "Email"),
    FormField("present_address", "Present_Address", "Present address"),
    FormField("permanent_address", "Permanent_Address", "Permanent address"),
    FormField("guardian_mobile", "Guardian_Mobile", "Guardian's mobile number"),
    FormField("previous_experience", "Previous_Experience", "Previous martial arts experience"),
    FormField("application_date", "Application_Date", "Date"),
)

_COORDS: dict[str, FieldRect] = {
    "Name_Bangla": FieldRect(193, 584, 364, 11),
    "Name_English": FieldRect(193, 562, 364, 11),
    "Father_Name": FieldRect(193, 540, 364, 11),
    "Mother_Name": FieldRect(193, 518, 364, 11),
    "Student_ID": FieldRect(193, 496, 150, 11),
    "Department": FieldRect(410, 496, 147, 11),
    "Level_Semester": FieldRect(193, 474, 150, 11),
    "Session": FieldRect(410, 474, 147, 11),
    "Date_of_Birth": FieldRect(193, 452, 150, 11),
    "Blood_Group": FieldRect(410, 452, 147, 11),
    "Mobile": FieldRect(193, 430, 150, 11),
    "Email": FieldRect(410, 430, 147, 11),
    "Present_Address": FieldRect(193, 408, 364, 11),
    "Permanent_Address": FieldRect(193, 386, 364, 11),
    "Guardian_Mobile": FieldRect(193, 364, 150, 11),
    "Previous_Experience": FieldRect(193, 342, 364, 11),
    "Application_Date": FieldRect(80, 120, 120, 11),
}

PHOTO_BOX = FieldRect(452, 640, 100, 120)
SIGNATURE_BOX = FieldRect(400, 100, 150, 45)


def _check_unique(fields: Iterable[FormField]) -> None:
    seen_ids: set[str] = set()
    seen_pdf_ids: set[str] = set()
    for field in fields:
        if field.id in seen_ids:
            raise ValueError(f"Duplicate form field id: {field.id}")
        if field.pdf_field_id in seen_pdf_ids:
            raise ValueError(f"Duplicate template field id: {field.pdf_field_id}")
        seen_ids.add(field.id)
        seen_pdf_ids.add(field.pdf_field_id)


_check_unique(FORM_FIELDS)

FIELD_COORDS: Mapping[str, FieldRect] = MappingProxyType(_COORDS)
_FIELDS_BY_ID: Mapping[str, FormField] = MappingProxyType({f.id: f for f in FORM_FIELDS})


def lookup(pdf_field_id: str) -> FieldRect | None:
    """Get the rectangle for a template field, or None if it has no position."""
    return FIELD_COORDS.get(pdf_field_id)


def get_form_field(field_id: str) -> FormField | None:
    """Get a form field definition by its logical id."""
    return _FIELDS_BY_ID.get(field_id)
