"""
Configuration management using pydantic-settings.

Loads configuration from environment variables and .env file.
"""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -----------------
    # Application
    # -----------------
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production",
    )

    # -----------------
    # Course
    # -----------------
    course_code: str = Field(
        default="ELEC3120",
        description="Course code shown in generic material titles",
    )
    course_title_prefix: str = Field(
        default="elec3120 ",
        description="Lowercase prefix removed from citation titles before matching",
    )

    # -----------------
    # Source cards
    # -----------------
    quote_min_length: int = Field(
        default=20,
        description="Shortest excerpt accepted as a readable quote",
    )
    truncate_length: int = Field(
        default=150,
        description="Default cut-off for truncated text",
    )
    preview_length: int = Field(
        default=200,
        description="Excerpt length shown under 'Why this source?'",
    )
    dedupe_content_chars: int = Field(
        default=80,
        description="Leading content characters that identify a card when deduplicating",
    )

    @property
    def generic_material_title(self) -> str:
        """Placeholder title the pipeline uses for untitled course material."""
        return f"{self.course_code} Material"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


# Convenience access
settings = get_settings()
