"""Application configuration using pydantic-settings."""

from enum import Enum
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class RasterizerBackend(str, Enum):
    """Available text rasterizer backends."""

    PILLOW = "pillow"
    MUPDF = "mupdf"


class DraftStoreBackend(str, Enum):
    """Available draft store backends."""

    MEMORY = "memory"
    JSON_FILE = "json_file"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FORMFILL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Environment = Environment.DEVELOPMENT
    log_level: str = "INFO"

    # Template
    template_path: str = "assets/blank-form.pdf"
    template_fetch_timeout: float = 10.0
    output_filename: str = "HSTU_Karate_Dojo_Form.pdf"
    blank_filename: str = "HSTU_Karate_Dojo_Form_Blank.pdf"

    # Text rasterization
    rasterizer_backend: RasterizerBackend = RasterizerBackend.MUPDF
    font_path: str = ""
    complex_script_font_path: str = ""
    raster_scale: float = 4.0
    font_size_ratio: float = 0.85
    text_left_inset: float = 1.0
    text_color: str = "#000000"

    # Composition
    flatten_fields: bool = True
    max_image_pixels: int = 50_000_000

    # Drafts
    draft_store_backend: DraftStoreBackend = DraftStoreBackend.MEMORY
    draft_store_path: str = ".formfill-drafts.json"

    @field_validator("raster_scale")
    @classmethod
    def _check_scale(cls, value: float) -> float:
        if value < 3:
            raise ValueError(f"raster_scale must be at least 3, got {value}")
        return value

    @field_validator("font_size_ratio")
    @classmethod
    def _check_ratio(cls, value: float) -> float:
        if not 0 < value <= 1:
            raise ValueError(f"font_size_ratio must be in (0, 1], got {value}")
        return value

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
