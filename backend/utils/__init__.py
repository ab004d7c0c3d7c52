"""
Merkle Whitelist Utilities Package.

Common utilities shared across all backend modules.
Requires Python 3.11+.
"""

from utils.config import Settings, get_settings
from utils.logger import LoggerMixin, configure_logging, get_logger

__all__ = [
    "Settings",
    "get_settings",
    "LoggerMixin",
    "configure_logging",
    "get_logger",
]
