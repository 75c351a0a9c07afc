from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Annotated, Any

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from ..catalog import DEFAULT_CATALOG_BASE_URL
from ..common.validation import DEFAULT_BATCH_LIMIT

DEFAULT_CORS_ORIGINS = ("http://localhost:4200",)


class Settings(BaseSettings):
    """Application configuration settings."""

    catalog_base_url: AnyHttpUrl = Field(
        default=DEFAULT_CATALOG_BASE_URL,
        validate_default=True,
        validation_alias="CATALOG_BASE_URL",
    )
    character_batch_limit: int = Field(
        default=DEFAULT_BATCH_LIMIT, gt=0, validation_alias="CHARACTER_BATCH_LIMIT"
    )
    request_timeout: float = Field(
        default=10.0, gt=0, validation_alias="CATALOG_TIMEOUT"
    )
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_CORS_ORIGINS),
        validation_alias="CORS_ORIGINS",
    )

    @property
    def catalog_url(self) -> str:
        return str(self.catalog_base_url).rstrip("/")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: Any) -> list[str]:
        if value is None:
            return []

        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return []
            if stripped.startswith("["):
                try:
                    value = json.loads(stripped)
                except json.JSONDecodeError as exc:
                    raise ValueError("CORS_ORIGINS must be valid JSON") from exc
            else:
                value = stripped.split(",")

        if not isinstance(value, Sequence) or isinstance(value, (bytes, bytearray)):
            raise ValueError("CORS_ORIGINS must be a list or comma separated string")

        origins: list[str] = []
        for origin in value:
            if origin is None:
                continue
            origin_str = str(origin).strip()
            if origin_str and origin_str not in origins:
                origins.append(origin_str)
        return origins

    model_config = SettingsConfigDict(case_sensitive=False)
