from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, field_validator

ENV_BOOL_TRUE = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in ENV_BOOL_TRUE


class Settings(BaseModel):
    tax_year: int = Field(default_factory=lambda: int(os.getenv("TAX_YEAR", "2025")))
    default_province: str = Field(default_factory=lambda: os.getenv("DEFAULT_PROVINCE", "ON"))
    tax_data_dir: str | None = Field(default_factory=lambda: os.getenv("TAX_DATA_DIR"))
    log_dir: str = Field(default_factory=lambda: os.getenv("LOG_DIR", "logs"))
    telemetry_log_enabled: bool = Field(
        default_factory=lambda: _env_bool("TELEMETRY_LOG_ENABLED", False)
    )
    build_version: str = Field(default_factory=lambda: os.getenv("BUILD_VERSION", "dev"))
    build_sha: str = Field(default_factory=lambda: os.getenv("BUILD_SHA", "local"))

    model_config = ConfigDict(frozen=True, validate_default=True)

    @field_validator("default_province", mode="before")
    @classmethod
    def _normalize_province(cls, value: str) -> str:
        code = (value or "ON").strip().upper()
        if len(code) != 2 or not code.isalpha():
            raise ValueError(f"DEFAULT_PROVINCE must be a two-letter code, got {code!r}")
        return code

    @field_validator("tax_data_dir", mode="before")
    @classmethod
    def _blank_is_none(cls, value: str | None) -> str | None:
        if value is None or not str(value).strip():
            return None
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
