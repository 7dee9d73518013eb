"""Shared setup logic for CLI commands."""

from __future__ import annotations

import json
import os
from typing import Any

import yaml

from finstate.core.config import Config
from finstate.core.exceptions import DataProcessingError


def load_config(config_file: str | None = None) -> Config:
    """Build the Config from defaults, an optional file, and FINSTATE_* env vars."""
    return Config(config_file=config_file)


def load_document(path: str) -> dict[str, Any]:
    """Load a YAML or JSON document whose top level is a mapping."""
    ext = os.path.splitext(path)[1].lower()
    try:
        with open(path) as f:
            if ext == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f) or {}
    except OSError as e:
        raise DataProcessingError(f"Cannot read {path}: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DataProcessingError(f"Cannot parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise DataProcessingError(f"{path} must contain a mapping at the top level")
    return data


def format_money(value: float) -> str:
    """Compact currency label: $1.2M, $45k, $950."""
    if abs(value) >= 1_000_000:
        return f"${value / 1_000_000:.1f}M"
    if abs(value) >= 1_000:
        return f"${value / 1_000:.0f}k"
    return f"${value:,.0f}"
