from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Mapping, Optional
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from shipping_rate_client.core.errors import ConfigError

# Resolve project root (repo root) relative to this file.
ROOT_DIR = Path(__file__).resolve().parents[3]
ENV_PATH = ROOT_DIR / ".env"

# Settings field -> environment variable, used for loading and for error messages.
UPS_ENV_VARS = {
    "base_url": "UPS_BASE_URL",
    "client_id": "UPS_CLIENT_ID",
    "client_secret": "UPS_CLIENT_SECRET",
}


class UPSConfig(BaseModel):
    base_url: str
    client_id: str = Field(min_length=1)
    client_secret: str = Field(min_length=1, repr=False)

    model_config = {"frozen": True}

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        value = value.strip()
        parsed = urlparse(value)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError("must be an absolute http(s) URL")
        return value.rstrip("/")

    @field_validator("client_id", "client_secret")
    @classmethod
    def strip_credentials(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class Settings(BaseModel):
    ups: UPSConfig
    log_level: str = "INFO"

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        return value.upper()


def load_ups_config(env: Optional[Mapping[str, str]] = None) -> UPSConfig:
    """
    Build a validated UPSConfig from environment variables.
    Every missing or malformed variable is reported in a single ConfigError.
    """
    env = os.environ if env is None else env
    raw = {field: env.get(var) for field, var in UPS_ENV_VARS.items()}
    missing = [UPS_ENV_VARS[field] for field, value in raw.items() if value is None]
    if missing:
        raise ConfigError(f"Missing required settings: {', '.join(missing)}")

    try:
        return UPSConfig(**raw)
    except ValidationError as exc:
        problems = []
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else ""
            problems.append(f"{UPS_ENV_VARS.get(field, field)} ({error['msg']})")
        raise ConfigError(f"Invalid settings: {'; '.join(problems)}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv(dotenv_path=ENV_PATH, override=False)
    return Settings(
        ups=load_ups_config(),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
