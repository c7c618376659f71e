# fastapi-backend/src/settings.py
from __future__ import annotations

import json
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    # Application
    app_name: str = Field(default="kiosk-metrics-api", env="APP_NAME")
    app_version: str = Field(default="0.1.0", env="APP_VERSION")
    log_level: str = Field(default="INFO", env="LOG_LEVEL")

    # CORS
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"], env="CORS_ALLOW_ORIGINS")
    cors_allow_methods: List[str] = Field(default_factory=lambda: ["*"], env="CORS_ALLOW_METHODS")
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"], env="CORS_ALLOW_HEADERS")
    cors_allow_credentials: bool = Field(default=False, env="CORS_ALLOW_CREDENTIALS")

    # Kiosk backend
    kiosk_base_url: str = Field(default="http://localhost:8080", env="KIOSK_BASE_URL")
    kiosk_request_timeout: float = Field(default=10.0, env="KIOSK_REQUEST_TIMEOUT")
    kiosk_tab_id: str = Field(default="metrics", env="KIOSK_TAB_ID")
    currency_symbol: str = Field(default="$", env="CURRENCY_SYMBOL")

    # Mock data (no backend calls)
    use_mock_data: bool = Field(default=False, env="USE_MOCK_DATA")
    mock_seed: Optional[int] = Field(default=0, env="MOCK_SEED")
    mock_days: int = Field(default=400, env="MOCK_DAYS")

    # Host / Port for serving the app
    host: str = Field(default="0.0.0.0", env="HOST")
    port: int = Field(default=8000, env="PORT")

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file="../.env",  # Look for .env in parent directory
        env_file_encoding="utf-8",
        protected_namespaces=(),
        validate_default=True,
        extra="ignore",
    )

    @staticmethod
    def _parse_list(value: object) -> List[str]:
        """
        Accept JSON array, '*' literal, or comma-separated string.
        Always returns a list of stripped strings. Empty parts are discarded.
        """
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [str(v).strip() for v in value if str(v).strip()]
        if isinstance(value, str):
            s = value.strip()
            if s == "*":
                return ["*"]
            # JSON array if it looks like one
            if s.startswith("[") and s.endswith("]"):
                try:
                    parsed = json.loads(s)
                    if not isinstance(parsed, list):
                        raise ValueError("Expected JSON array")
                    return [str(v).strip() for v in parsed if str(v).strip()]
                except json.JSONDecodeError as e:
                    raise ValueError(f"Invalid JSON array: {e}") from e
            # Fallback: CSV
            return [part.strip() for part in s.split(",") if part.strip()]
        # Anything else is invalid
        raise TypeError(f"Unsupported list value type: {type(value).__name__}")

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def _lists_from_env(cls, v: object) -> List[str]:
        return cls._parse_list(v)

    @field_validator("log_level", mode="after")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        x = (v or "INFO").upper()
        # Align with standard levels
        valid = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}
        if x not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(valid)}")
        return x

    @field_validator("kiosk_base_url", mode="after")
    @classmethod
    def _strip_base_url(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("kiosk_request_timeout", "mock_days", mode="after")
    @classmethod
    def _positive(cls, v):
        if v <= 0:
            raise ValueError("must be greater than 0")
        return v


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings()
