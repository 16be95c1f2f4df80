"""Shared form layout types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldRect:
    """Axis-aligned box on the page.

    Coordinates are PDF page space: points, origin at the bottom-left.

    Attributes:
        x: Left edge
        y: Bottom edge
        w: Width
        h: Height
    """

    x: float
    y: float
    w: float
    h: float

    @property
    def size(self) -> tuple[float, float]:
        return (self.w, self.h)

    def as_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h}


@dataclass(frozen=True)
class FormField:
    """A logical form field and the template location it is drawn at.

    Attributes:
        id: Name used by callers in form values
        pdf_field_id: Widget name in the template, key into the coordinate table
        label: Human readable label
    """

    id: str
    pdf_field_id: str
    label: str = ""
