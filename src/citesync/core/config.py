"""Application configuration using Pydantic Settings.

Environment variables are loaded with the CITESYNC_ prefix.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for a citation session, loaded from environment variables."""

    # Service configuration
    service_name: str = "citesync"
    environment: str = Field(default="development", description="Runtime environment")
    log_level: str = Field(default="INFO", description="Logging level")
    debug: bool = Field(default=True, description="Emit debug trace of session calls")

    # Citation defaults
    default_style: str = Field(
        default="american-medical-association",
        description="Style ID sent on initialize when the document stores none",
    )
    default_locale: str = Field(default="en-US", description="Locale ID sent on initialize")
    default_mode: Literal["note", "in-text"] = Field(
        default="note",
        description="Mode assumed until the processor reports one",
    )
    document_id: str = Field(
        default="default",
        description="Identity under which citation data is persisted",
    )
    demo: bool = Field(
        default=False,
        description="Restore citation slots from stored peg positions on load",
    )

    # Processor
    processor_url: str = Field(
        default="http://localhost:8090",
        description="Citation processor service URL",
    )
    processor_timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Citation processor request timeout",
    )
    registration_policy: Literal["drop", "latest_wins"] = Field(
        default="drop",
        description="What to do with a register request made while one is in flight",
    )

    # Rendering
    bibliography_container_width: int = Field(
        default=680,
        gt=0,
        description="Assumed bibliography width in px for second-field alignment",
    )

    model_config = SettingsConfigDict(
        env_prefix="CITESYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings singleton
    """
    return Settings()
