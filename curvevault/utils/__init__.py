"""Shared utilities: logging and input validation."""

from curvevault.utils.logger import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
