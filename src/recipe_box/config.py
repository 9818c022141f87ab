from __future__ import annotations
from pathlib import Path
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="RECIPE_BOX_", extra="ignore")

    api_base_url: str = "http://localhost:3000"
    data_dir: Path = Path.home() / ".recipe_box"
    request_timeout: float = 10.0

    @field_validator("api_base_url", mode="after")
    @classmethod
    def normalize_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("RECIPE_BOX_API_BASE_URL must be an http:// or https:// URL")
        return v.rstrip("/")

    @field_validator("request_timeout", mode="after")
    @classmethod
    def positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("RECIPE_BOX_REQUEST_TIMEOUT must be positive")
        return v
