"""Small shared utilities."""

from .async_helpers import run_async_safely
from .logging import setup_logging

__all__ = ["run_async_safely", "setup_logging"]
