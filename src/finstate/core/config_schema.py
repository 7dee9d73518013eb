"""Pydantic models for config validation.

Opt-in schema validation for ``Config.config_data``.  Call
``Config.validated()`` to obtain a typed, validated ``FinStateConfig``
instance.  Existing dict-based access continues to work unchanged.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PathsConfig(BaseModel):
    """File-system paths used by the application."""

    data_dir: Path
    store_file: Path | None = None

    @field_validator("data_dir", "store_file", mode="before")
    @classmethod
    def _expand_user(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v


class ProjectionConfig(BaseModel):
    """Cash-flow projection knobs."""

    horizon_years: int = Field(default=10, ge=1, le=100)
    default_inflation_rate: float = 3.0
    default_income_growth_rate: float = 3.0


class LedgerConfig(BaseModel):
    """Tolerances used when comparing derived and stored holdings."""

    quantity_tolerance: float = Field(default=1e-8, gt=0)
    cost_basis_tolerance: float = Field(default=0.01, gt=0)


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    file: str | None = None

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"unknown log level {v!r}")
        return level


class FinStateConfig(BaseModel):
    """Root configuration model.

    Uses ``extra="allow"`` so consumers can bolt on custom sections
    without touching this schema.
    """

    model_config = ConfigDict(extra="allow")

    paths: PathsConfig = PathsConfig(data_dir=Path("~/.finstate-data"))
    projection: ProjectionConfig = ProjectionConfig()
    ledger: LedgerConfig = LedgerConfig()
    logging: LoggingConfig = LoggingConfig()
