"""Utility modules for ghostrelay."""

from .logging import get_logger, request_log_context, setup_logging
from .sanitize import mask_secret, truncate_for_logging

__all__ = [
    "get_logger",
    "request_log_context",
    "setup_logging",
    "mask_secret",
    "truncate_for_logging",
]
