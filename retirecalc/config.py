"""Process configuration read from environment variables."""

from __future__ import annotations

import logging
import os
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


class Settings(BaseModel):
    ortto_api_key: Optional[str] = None
    ortto_endpoint: Optional[str] = None
    # None: /api/lead waits as long as the CRM takes; background sends use their own default
    relay_timeout: Optional[float] = Field(default=None, gt=0)
    cors_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def known_log_level(cls, value: object) -> str:
        """Unknown level names fall back to INFO instead of failing at startup."""
        name = str(value or "").strip().upper()
        if isinstance(logging.getLevelName(name), int):
            return name
        return "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current process environment."""
        timeout_raw = os.getenv("RELAY_TIMEOUT", "").strip()
        origins_raw = os.getenv("CORS_ORIGINS", "").strip()

        return cls(
            ortto_api_key=os.getenv("ORTTO_API_KEY") or None,
            ortto_endpoint=os.getenv("ORTTO_ENDPOINT") or None,
            relay_timeout=float(timeout_raw) if timeout_raw else None,
            cors_origins=(
                [origin.strip() for origin in origins_raw.split(",") if origin.strip()]
                if origins_raw
                else list(DEFAULT_CORS_ORIGINS)
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def missing_relay_settings(self) -> Dict[str, bool]:
        return {
            "ORTTO_API_KEY": not self.ortto_api_key,
            "ORTTO_ENDPOINT": not self.ortto_endpoint,
        }

    @property
    def relay_configured(self) -> bool:
        return not any(self.missing_relay_settings().values())
