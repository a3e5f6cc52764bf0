"""Utilities for the revision loader."""

from .loader_logging import JsonFormatter, setup_logging

__all__ = ["JsonFormatter", "setup_logging"]
