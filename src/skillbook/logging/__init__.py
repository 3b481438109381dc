"""
Logging module - structured logging with a HUMAN level for disclosure traces.
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
