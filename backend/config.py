"""
Receiver settings.

Everything here is optional; the bind address and port come from the
command line. Values are read from the environment, after an optional
.env file next to the backend has been loaded:

  LOG_RECEIVER_MAX_BODY_BYTES=10485760
  LOG_RECEIVER_SESSION_TTL=600
  LOG_LEVEL=DEBUG
"""

import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

load_dotenv(Path(__file__).parent / ".env")

DEFAULT_MAX_BODY_BYTES = 10 * 1024 * 1024

LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseModel):
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES
    session_ttl: Optional[float] = None     # seconds; None = never expire
    log_level: str = "INFO"

    @field_validator("max_body_bytes")
    @classmethod
    def _positive_cap(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_body_bytes must be positive")
        return v

    @field_validator("session_ttl")
    @classmethod
    def _positive_ttl(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("session_ttl must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(LOG_LEVELS)}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        values = {}
        if env.get("LOG_RECEIVER_MAX_BODY_BYTES"):
            values["max_body_bytes"] = env["LOG_RECEIVER_MAX_BODY_BYTES"]
        if env.get("LOG_RECEIVER_SESSION_TTL"):
            values["session_ttl"] = env["LOG_RECEIVER_SESSION_TTL"]
        if env.get("LOG_LEVEL"):
            values["log_level"] = env["LOG_LEVEL"]
        return cls(**values)
