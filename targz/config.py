"""
Configuration for the targz command line tool.

Uses pydantic-settings for environment variable loading. The compress()
API itself takes no configuration; these settings only shape how the CLI
logs.
"""

from typing import Any, Literal

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """CLI settings loaded from TARGZ_* environment variables."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Root logger level"
    )
    log_format: Literal["text", "json"] = Field(
        default="text", description="Log line format (text or json)"
    )

    model_config = {"env_prefix": "TARGZ_"}

    @field_validator("log_level", "log_format", mode="before")
    @classmethod
    def normalize_case(cls, value: Any, info: ValidationInfo) -> Any:
        if not isinstance(value, str):
            return value
        return value.upper() if info.field_name == "log_level" else value.lower()
