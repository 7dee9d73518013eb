"""Shared type aliases used across finstate."""

from pathlib import Path
from typing import Any

# Entity store records are plain dicts keyed by field name
Record = dict[str, Any]

# (ticker, account_id) with account_id None for the "unassigned" bucket
AccountKey = tuple[str, str | None]

# Path types
PathLike = str | Path
