"""
Kumo – Shared Module
====================
Cross-cutting utilities used by every layer:
- config/: Settings
- logging/: logging setup

No business logic lives here.
"""

from kumo.shared.config.settings import settings
from kumo.shared.logging.logger import setup_logging, get_logger

__all__ = [
    "settings",
    "setup_logging",
    "get_logger",
]
