"""
Configuration module for skillfetch.

Exports the main components for convenient imports.
"""

from .loader import load_config
from .schema import (
    AppConfig,
    DownloadConfig,
    InstallConfig,
    LoggingConfig,
    SourceConfig,
)

__all__ = [
    "load_config",
    "AppConfig",
    "DownloadConfig",
    "InstallConfig",
    "LoggingConfig",
    "SourceConfig",
]
