"""Configuration for the Hyperfabric Adapter."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SPEC_FILENAME = "hf_spec_modified.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", extra="ignore"
    )

    service_name: str = Field(default="hyperfabric-adapter")

    hyperfabric_api_token: str
    hyperfabric_api_base_url: str = Field(default="https://hyperfabric.cisco.com")
    hyperfabric_api_timeout_seconds: Optional[float] = Field(default=None)
    hyperfabric_spec_path: Optional[str] = Field(default=None)

    adapter_transport: str = Field(default="stdio")
    adapter_host: str = Field(default="127.0.0.1")
    adapter_port: int = Field(default=8000)

    adapter_log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("adapter_log_level", "log_level"),
    )

    @field_validator("hyperfabric_api_token")
    @classmethod
    def _token_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("HYPERFABRIC_API_TOKEN must not be empty")
        return value.strip()

    @field_validator("adapter_log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper() or "INFO"
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    def spec_path(self) -> Path:
        root = Path.cwd()
        if not self.hyperfabric_spec_path:
            return root / DEFAULT_SPEC_FILENAME
        path = Path(self.hyperfabric_spec_path).expanduser()
        return path if path.is_absolute() else root / path


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
