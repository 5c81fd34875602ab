"""Application settings for the bakery dashboard facade."""

import json
import os
from functools import lru_cache
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=(".env"), env_file_encoding="utf-8")

    # App
    APP_NAME: str = "Bakery Dashboard"
    ENVIRONMENT: str = "development"  # development | production | test

    # Baker backend
    BAKERY_API_URL: str = "http://localhost:8080/api/bakery"
    # None disables the per-call timeout for mutating operations
    REQUEST_TIMEOUT_SECONDS: float | None = 30.0
    # degrade: log and return an empty value | raise: raise BakeryTransportError
    RETRIEVAL_FAILURE_POLICY: Literal["degrade", "raise"] = "degrade"

    # CORS
    # Accept list or CSV/JSON string from env; normalized to list[str] by validators
    CORS_ORIGINS: list[str] | str = [
        "http://localhost:4200",
        "http://127.0.0.1:4200",
    ]
    ALLOW_CREDENTIALS: bool = True

    @field_validator("BAKERY_API_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Paths are appended with a leading slash."""
        return v.rstrip("/")

    @field_validator("REQUEST_TIMEOUT_SECONDS")
    @classmethod
    def positive_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("REQUEST_TIMEOUT_SECONDS must be positive or unset")
        return v

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: object) -> list[str]:
        """Allow list, CSV string, or JSON array string for CORS origins."""
        if isinstance(v, list):
            return [str(i).strip() for i in v]
        if isinstance(v, str):
            s = v.strip()
            if not s:
                return []
            if s.startswith("["):
                try:
                    parsed = json.loads(s)
                except json.JSONDecodeError as e:
                    raise ValueError(
                        "CORS_ORIGINS must be a CSV list or JSON array string"
                    ) from e
                if not isinstance(parsed, list):
                    raise ValueError("CORS_ORIGINS JSON must be a list")
                return [str(i).strip() for i in parsed]
            # CSV fallback
            return [i.strip() for i in s.split(",") if i.strip()]
        raise ValueError("Invalid CORS_ORIGINS type; expected str or list[str]")

    @model_validator(mode="after")
    def _validate_cors_credentials(self) -> "Settings":
        """Ensure wildcard origins are not used when credentials are allowed."""
        if isinstance(self.CORS_ORIGINS, str):
            self.CORS_ORIGINS = self.assemble_cors_origins(self.CORS_ORIGINS)
        if self.ALLOW_CREDENTIALS and any(
            o.strip() == "*" for o in (self.CORS_ORIGINS or [])
        ):
            raise ValueError(
                "CORS configuration error: ALLOW_CREDENTIALS=True but "
                "CORS_ORIGINS contains '*'. Use explicit origins when credentials "
                "are allowed."
            )
        return self


@lru_cache
def get_settings() -> Settings:
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env not in {"development", "production", "test"}:
        raise ValueError("ENVIRONMENT must be 'development', 'production', or 'test'")

    if env == "production":
        env_file = ".env.prod"
    elif env == "development":
        env_file = ".env.dev"
    else:
        # test environment - no env file needed, use defaults
        env_file = ""

    # `_env_file` is a runtime-only kwarg of pydantic-settings.
    return Settings(_env_file=env_file or None)  # type: ignore[call-arg]
