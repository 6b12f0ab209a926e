"""Pydantic models describing a lookup run."""

from __future__ import annotations

from enum import Enum
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .. import __version__

CDX_ENDPOINT = "http://web.archive.org/cdx/search/cdx"


class SelectionMode(str, Enum):
    """Which snapshot is reported when several exist."""

    OLDEST = "oldest"
    LATEST = "latest"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class LookupSettings(BaseModel):
    """Immutable knobs shared by the fetcher, worker pool and aggregator."""

    model_config = ConfigDict(frozen=True)

    workers: int = Field(default=10, gt=0)
    request_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Seconds allowed per phase of an HTTP request (connect, read, write, pool wait); not a total deadline.",
    )
    delay: float = Field(default=0.0, ge=0, description="Pause after each request, per worker.")
    retry_attempts: int = Field(default=3, ge=0, description="Retries after the first try.")
    retry_delay: float = Field(default=1.0, ge=0, description="Base backoff delay in seconds.")
    mode: SelectionMode = SelectionMode.OLDEST
    hide_failures: bool = False
    endpoint: str = CDX_ENDPOINT
    user_agent: str = f"timetraveller/{__version__}"

    @field_validator("endpoint")
    @classmethod
    def _validate_endpoint(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"endpoint must be an absolute http(s) URL: {value!r}")
        return value

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def merged(self, overrides: dict[str, Any]) -> "LookupSettings":
        """Return a validated copy with non-``None`` overrides applied."""

        payload = self.model_dump()
        payload.update({key: value for key, value in overrides.items() if value is not None})
        return LookupSettings.model_validate(payload)


__all__ = ["CDX_ENDPOINT", "LookupSettings", "SelectionMode"]
