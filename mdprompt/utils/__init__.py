"""Utility modules for mdprompt"""

from .error_handler import critical_operation, handle_errors, safe_with_default
from .logger import (
    get_logger,
    preview_text,
    setup_logging,
)
from .lru_cache import LRUCache
from .mixins import LoggerMixin

__all__ = [
    "LRUCache",
    "LoggerMixin",
    "critical_operation",
    "get_logger",
    "handle_errors",
    "preview_text",
    "safe_with_default",
    "setup_logging",
]
