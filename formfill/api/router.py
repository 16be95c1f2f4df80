"""API router - FastAPI endpoints."""

import json
from functools import lru_cache

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from formfill import __version__
from formfill.api.models import (
    DraftResponse,
    ErrorResponse,
    FieldInfo,
    FieldsResponse,
    HealthResponse,
    RectModel,
    ValidationResponse,
)
from formfill.config import get_settings
from formfill.errors import DocumentSerializationError, TemplateLoadError
from formfill.images import AssetImage, ImageProfile, get_profile, validate_image
from formfill.images.validation import PHOTO_PROFILE, SIGNATURE_PROFILE
from formfill.pdf import FIELD_COORDS, FORM_FIELDS, fill_form, load_template
from formfill.pdf.coordinates import PHOTO_BOX, SIGNATURE_BOX
from formfill.storage import BaseDraftStore, clear_draft, create_draft_store, load_draft, save_draft
from formfill.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Admission Form"])


@lru_cache
def get_draft_store() -> BaseDraftStore:
    """Draft store shared by the draft endpoints."""
    return create_draft_store()


def _parse_values(raw: str) -> dict[str, str]:
    try:
        values = json.loads(raw or "{}")
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=400, detail=f"fields must be a JSON object: {e.msg}")

    if not isinstance(values, dict):
        raise HTTPException(status_code=400, detail="fields must be a JSON object")

    return {str(k): str(v) for k, v in values.items() if v is not None}


async def _read_image(upload: UploadFile | None, profile: ImageProfile) -> AssetImage | None:
    """Read and validate an optional upload, rejecting unusable images."""
    if upload is None or not upload.filename:
        return None

    try:
        data = await upload.read()
    except Exception as e:
        logger.error("Failed to read uploaded image", profile=profile.name, error=str(e))
        raise HTTPException(status_code=400, detail=f"Failed to read uploaded {profile.name}")

    if not data:
        raise HTTPException(status_code=400, detail=f"Empty {profile.name} uploaded")

    result = await validate_image(data, upload.content_type, profile)
    if not result.valid:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid {profile.name}: {' '.join(result.errors)}",
        )
    for warning in result.warnings:
        logger.info("Image warning", profile=profile.name, warning=warning)

    return AssetImage.from_upload(data, upload.content_type)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Check if the API is healthy and running",
)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    settings = get_settings()
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.environment.value,
    )


@router.get(
    "/fields",
    response_model=FieldsResponse,
    summary="Form Layout",
    description="List the fillable fields and where they are drawn on the template",
)
async def list_fields() -> FieldsResponse:
    """List form fields with their rectangles."""
    return FieldsResponse(
        fields=[FieldInfo.from_field(f, FIELD_COORDS.get(f.pdf_field_id)) for f in FORM_FIELDS],
        photo_box=RectModel.from_rect(PHOTO_BOX),
        signature_box=RectModel.from_rect(SIGNATURE_BOX),
    )


@router.get(
    "/template",
    summary="Blank Form",
    description="Download the blank form template",
    responses={503: {"model": ErrorResponse, "description": "Template unavailable"}},
)
async def download_template() -> Response:
    """Serve the unfilled template."""
    settings = get_settings()
    try:
        template = await load_template()
    except TemplateLoadError as e:
        logger.error("Template unavailable", error=str(e))
        raise HTTPException(status_code=503, detail=e.message)

    return Response(
        content=template,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{settings.blank_filename}"'},
    )


@router.post(
    "/validate",
    response_model=ValidationResponse,
    responses={400: {"model": ErrorResponse, "description": "Unknown profile"}},
    summary="Validate Image",
    description="""
    Check a photo or signature before filling the form.

    **Errors** make the image unusable: unsupported type, file too large,
    too few pixels, corrupted data.

    **Warnings** are advisory: very large images are resized, unusual
    aspect ratios are accepted.
    """,
)
async def validate_upload(
    file: UploadFile = File(..., description="Photo or signature image (JPG or PNG)"),
    profile: str = Form(default="photo", description="Image profile: photo or signature"),
) -> ValidationResponse:
    """Validate an uploaded image against a profile."""
    try:
        image_profile = get_profile(profile)
    except KeyError:
        raise HTTPException(status_code=400, detail=f"Unknown profile: {profile}")

    data = await file.read()
    result = await validate_image(data, file.content_type, image_profile)
    return ValidationResponse.from_result(result)


@router.post(
    "/fill",
    responses={
        200: {"content": {"application/pdf": {}}, "description": "Filled form"},
        400: {"model": ErrorResponse, "description": "Invalid request"},
        500: {"model": ErrorResponse, "description": "PDF could not be written"},
        503: {"model": ErrorResponse, "description": "Template unavailable"},
    },
    summary="Fill Form",
    description="""
    Fill the admission form and return the PDF.

    Text values are drawn as images so that Bengali and English render the
    same in every viewer. Fields that cannot be drawn are left blank; the
    number of skipped steps is returned in the `X-Formfill-Skipped` header.
    """,
)
async def fill(
    fields: str = Form(default="{}", description="JSON object of field id to value"),
    photo: UploadFile | None = File(default=None, description="Passport size photo"),
    signature: UploadFile | None = File(default=None, description="Signature image"),
) -> Response:
    """Fill the form template with the submitted data."""
    settings = get_settings()
    values = _parse_values(fields)
    photo_asset = await _read_image(photo, PHOTO_PROFILE)
    signature_asset = await _read_image(signature, SIGNATURE_PROFILE)

    logger.info(
        "Filling form",
        field_count=len(values),
        has_photo=photo_asset is not None,
        has_signature=signature_asset is not None,
    )

    try:
        result = await fill_form(values, photo_asset, signature_asset)
    except TemplateLoadError as e:
        logger.error("Template unavailable", error=str(e))
        raise HTTPException(status_code=503, detail=e.message)
    except DocumentSerializationError as e:
        logger.error("Could not write filled form", error=str(e))
        raise HTTPException(status_code=500, detail=e.message)

    return Response(
        content=result.pdf,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{settings.output_filename}"',
            "X-Formfill-Skipped": str(len(result.failures)),
        },
    )


@router.put(
    "/drafts",
    response_model=DraftResponse,
    summary="Save Draft",
    description="Save form values and images so the form can be resumed later",
)
async def save_form_draft(
    fields: str = Form(default="{}", description="JSON object of field id to value"),
    photo: UploadFile | None = File(default=None),
    signature: UploadFile | None = File(default=None),
    store: BaseDraftStore = Depends(get_draft_store),
) -> DraftResponse:
    """Save a draft."""
    values = _parse_values(fields)
    photo_asset = await _read_image(photo, PHOTO_PROFILE)
    signature_asset = await _read_image(signature, SIGNATURE_PROFILE)

    save_draft(store, values, photo_asset, signature_asset)
    return await get_form_draft(store)


@router.get(
    "/drafts",
    response_model=DraftResponse,
    summary="Load Draft",
    description="Load the saved form values and images",
)
async def get_form_draft(store: BaseDraftStore = Depends(get_draft_store)) -> DraftResponse:
    """Load the saved draft."""
    draft = load_draft(store)
    return DraftResponse(
        values=draft.values,
        photo=draft.photo.to_data_url() if draft.photo else None,
        signature=draft.signature.to_data_url() if draft.signature else None,
    )


@router.delete(
    "/drafts",
    status_code=204,
    summary="Clear Draft",
    description="Forget the saved form values and images",
)
async def delete_form_draft(store: BaseDraftStore = Depends(get_draft_store)) -> Response:
    """Clear the saved draft."""
    clear_draft(store)
    return Response(status_code=204)
