"""Exception types shared across the form filling pipeline."""

from typing import Any


class FormFillError(Exception):
    """Base exception for form filling failures."""

    def __init__(self, message: str, stage: str, details: dict[str, Any] | None = None):
        self.message = message
        self.stage = stage
        self.details = details or {}
        super().__init__(f"[{stage}] {message}")


class TemplateLoadError(FormFillError):
    """Raised when the PDF template cannot be fetched or opened."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, "load", details)


class DocumentSerializationError(FormFillError):
    """Raised when the filled document cannot be written out."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, "serialize", details)


class ImageNormalizationError(FormFillError):
    """Raised when a user image cannot be prepared for embedding."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, "normalize", details)


class RasterizationError(FormFillError):
    """Raised by rasterizer backends when text cannot be drawn."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, "rasterize", details)


class TemplateInspectionError(FormFillError):
    """Raised when the template's form fields cannot be read."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, "inspect", details)
