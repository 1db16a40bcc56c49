"""Settings for loading zoneinfo files through a ZoneCache."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "ZoneCacheSettings",
]

DEFAULT_MAX_CONCURRENCY = 16


class ZoneCacheSettings(BaseModel):
    """Settings used when constructing a ZoneCache."""

    zoneinfo_dir: str | None = None
    """Root of the zoneinfo tree, or None to locate one on the system."""

    max_concurrency: int = Field(default=DEFAULT_MAX_CONCURRENCY, ge=1)
    """Maximum number of files loaded at the same time while precaching."""

    model_config = ConfigDict(frozen=True)

    @field_validator("zoneinfo_dir")
    @classmethod
    def strip_trailing_separator(cls, value: str | None) -> str | None:
        """Remove trailing path separators so relative names can be derived."""
        if value is None:
            return None
        stripped = value.rstrip("/")
        return stripped or "/"
