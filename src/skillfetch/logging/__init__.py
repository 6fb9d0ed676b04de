"""
Logging module - Structured logging system.

HUMAN level (25) carries install progress; everything else is technical.
"""

from .human import HumanFormatter, HumanLog, HumanLogHandler
from .levels import HUMAN
from .setup import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "HUMAN",
    "HumanFormatter",
    "HumanLog",
    "HumanLogHandler",
]
