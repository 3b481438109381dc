"""
Configuration module for skillbook.

Exports the main components for convenient imports.
"""

from .loader import deep_merge, load_config
from .schema import AppConfig, LoggingConfig, MatcherConfig, StoreConfig

__all__ = [
    "load_config",
    "deep_merge",
    "AppConfig",
    "LoggingConfig",
    "MatcherConfig",
    "StoreConfig",
]
