"""Application settings for server runtime and tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from typing import Literal

from pydantic import AliasChoices
from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_PUBLIC_DIR = Path(__file__).resolve().parents[1] / "public"

LogLevel = Literal["critical", "error", "warning", "info", "debug"]


class Settings(BaseSettings):
    """Typed settings loaded from environment variables or explicit kwargs."""

    connectfour_app_env: str = "dev"
    connectfour_app_host: str = "127.0.0.1"
    connectfour_app_port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("connectfour_app_port", "port"),
    )

    connectfour_public_dir: Path = DEFAULT_PUBLIC_DIR
    connectfour_log_level: LogLevel = "info"

    @field_validator("connectfour_public_dir")
    @classmethod
    def resolve_public_dir(cls, value: Path) -> Path:
        """Anchor the static root so containment checks compare real paths."""
        return value.expanduser().resolve()

    @field_validator("connectfour_log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


def load_settings() -> Settings:
    """Load settings from process environment."""
    return Settings()
