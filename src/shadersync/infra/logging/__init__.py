from __future__ import annotations

from .config import LoggingConfig
from .core import (
    _CONFIGURED_FLAG_ATTR,
    _QUEUE_LISTENER_ATTR,
    configure_logging,
    get_logger,
    shutdown_logging,
)
from .handlers import _HANDLER_TAG_ATTR, HighlightFormatter

__all__ = [
    "LoggingConfig",
    "HighlightFormatter",
    "configure_logging",
    "get_logger",
    "shutdown_logging",
]
