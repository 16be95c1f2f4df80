"""Unit tests for the coordinate table."""

import pytest

from formfill.models import FieldRect, FormField
from formfill.pdf.coordinates import (
    FIELD_COORDS,
    FORM_FIELDS,
    PHOTO_BOX,
    SIGNATURE_BOX,
    _check_unique,
    get_form_field,
    lookup,
)


class TestLookup:
    """Tests for rectangle lookup."""

    def test_bangla_name_rect(self):
        """Test the Bangla name field position."""
        assert lookup("Name_Bangla") == FieldRect(193, 584, 364, 11)

    def test_unknown_field_is_absent(self):
        """Test that unknown fields return None instead of raising."""
        assert lookup("Does_Not_Exist") is None

    def test_every_form_field_is_positioned(self):
        """Test that each defined field can be drawn."""
        for form_field in FORM_FIELDS:
            assert lookup(form_field.pdf_field_id) is not None, form_field.id

    def test_table_is_read_only(self):
        """Test that the shared table cannot be mutated."""
        with pytest.raises(TypeError):
            FIELD_COORDS["Name_Bangla"] = FieldRect(0, 0, 1, 1)

    def test_rects_fit_on_a4(self):
        """Test that all boxes lie on the A4 page."""
        for rect in [*FIELD_COORDS.values(), PHOTO_BOX, SIGNATURE_BOX]:
            assert 0 <= rect.x and rect.x + rect.w <= 595
            assert 0 <= rect.y and rect.y + rect.h <= 842


class TestFormFields:
    """Tests for form field definitions."""

    def test_get_form_field(self):
        """Test lookup by logical id."""
        form_field = get_form_field("name_bn")

        assert form_field is not None
        assert form_field.pdf_field_id == "Name_Bangla"

    def test_get_unknown_form_field(self):
        assert get_form_field("nickname") is None

    def test_duplicate_ids_rejected(self):
        """Test that duplicate logical ids are caught."""
        with pytest.raises(ValueError, match="Duplicate form field id"):
            _check_unique([FormField("a", "A"), FormField("a", "B")])

    def test_duplicate_template_ids_rejected(self):
        """Test that two fields pointing at one template field are caught."""
        with pytest.raises(ValueError, match="Duplicate template field id"):
            _check_unique([FormField("a", "A"), FormField("b", "A")])

    def test_rect_is_immutable(self):
        rect = FieldRect(1, 2, 3, 4)

        with pytest.raises(AttributeError):
            rect.x = 5

        assert rect.size == (3, 4)
        assert rect.as_dict() == {"x": 1, "y": 2, "w": 3, "h": 4}
