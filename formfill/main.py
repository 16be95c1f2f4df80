"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from formfill import __version__
from formfill.api.router import router
from formfill.config import get_settings
from formfill.utils.logging import get_logger

logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logger.info(
        "Starting admission form service",
        version=__version__,
        environment=settings.environment.value,
    )
    logger.info(
        "Form configuration",
        template=settings.template_path,
        rasterizer=settings.rasterizer_backend.value,
        drafts=settings.draft_store_backend.value,
    )

    yield

    logger.info("Shutting down admission form service")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Admission Form Filler",
        description="""
        Fills the HSTU Karate Dojo admission form PDF.

        ## Features

        - **Any script**: Bengali and English values are rasterized, so they
          render the same in every PDF viewer
        - **Photo and signature**: JPG or PNG, validated and resized
        - **Drafts**: save and resume a half filled form

        ## Usage

        1. Check photo and signature with `/api/v1/validate`
        2. Post field values and images to `/api/v1/fill`
        3. Receive the filled PDF
        """,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if not settings.is_production else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Formfill-Skipped"],
    )

    app.include_router(router)

    @app.get("/", include_in_schema=False)
    async def root():
        """Service information."""
        return {
            "message": "Admission Form Filler API",
            "version": __version__,
            "docs": "/docs",
            "health": "/api/v1/health",
        }

    return app


app = create_app()
