"""API request and response models."""

from pydantic import BaseModel, Field

from formfill.images.models import ValidationResult
from formfill.models import FieldRect, FormField


class RectModel(BaseModel):
    """Rectangle in PDF page space (points, origin bottom-left)."""

    x: float
    y: float
    w: float
    h: float

    @classmethod
    def from_rect(cls, rect: FieldRect) -> "RectModel":
        return cls(**rect.as_dict())


class FieldInfo(BaseModel):
    """A fillable text field."""

    id: str
    pdf_field_id: str
    label: str
    rect: RectModel | None = Field(
        default=None,
        description="Where the value is drawn; fields without a rect are not drawn",
    )

    @classmethod
    def from_field(cls, form_field: FormField, rect: FieldRect | None) -> "FieldInfo":
        return cls(
            id=form_field.id,
            pdf_field_id=form_field.pdf_field_id,
            label=form_field.label,
            rect=RectModel.from_rect(rect) if rect else None,
        )


class FieldsResponse(BaseModel):
    """Layout of the form template."""

    fields: list[FieldInfo]
    photo_box: RectModel
    signature_box: RectModel


class DimensionsModel(BaseModel):
    width: int
    height: int


class ValidationResponse(BaseModel):
    """Result of checking an uploaded image."""

    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    dimensions: DimensionsModel | None = None

    @classmethod
    def from_result(cls, result: ValidationResult) -> "ValidationResponse":
        dimensions = None
        if result.dimensions:
            dimensions = DimensionsModel(
                width=result.dimensions.width,
                height=result.dimensions.height,
            )
        return cls(
            valid=result.valid,
            errors=result.errors,
            warnings=result.warnings,
            dimensions=dimensions,
        )


class DraftResponse(BaseModel):
    """A saved form draft; images as data URLs."""

    values: dict[str, str] = Field(default_factory=dict)
    photo: str | None = None
    signature: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
    environment: str


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str
    detail: str | None = None
    stage: str | None = None
