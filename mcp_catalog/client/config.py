from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..common.validation import DEFAULT_BATCH_LIMIT

DEFAULT_FACADE_URL = "http://127.0.0.1:8000"
DEFAULT_CHARACTER_BASE_URL = "https://rickandmortyapi.com/api/character"


class ClientSettings(BaseSettings):
    """Configuration for sessions talking to the catalog facade."""

    facade_url: str = Field(default=DEFAULT_FACADE_URL, validation_alias="FACADE_URL")
    character_base_url: str = Field(
        default=DEFAULT_CHARACTER_BASE_URL, validation_alias="CHARACTER_BASE_URL"
    )
    batch_limit: int = Field(
        default=DEFAULT_BATCH_LIMIT, gt=0, validation_alias="CHARACTER_BATCH_LIMIT"
    )
    cache_max_entries: int | None = Field(
        default=None, gt=0, validation_alias="CHARACTER_CACHE_MAX_ENTRIES"
    )
    coalesce_in_flight: bool = Field(
        default=False, validation_alias="COALESCE_IN_FLIGHT"
    )
    request_timeout: float = Field(
        default=10.0, gt=0, validation_alias="FACADE_TIMEOUT"
    )

    model_config = SettingsConfigDict(case_sensitive=False)
