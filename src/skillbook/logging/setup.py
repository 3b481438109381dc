"""
Structured logging configuration.

Three independent pipelines:
1. File (JSON) -- if config.file is set. Captures everything (DEBUG+).
2. Human handler (stderr) -- only HUMAN events: what gets disclosed.
3. Technical console (stderr) -- WARNING by default, INFO with -v, DEBUG
   with -vv. Excludes HUMAN.

--quiet silences pipelines 2 and 3.
"""

import logging
import sys
from pathlib import Path

import structlog

from ..config.schema import LoggingConfig
from .human import HumanLogHandler
from .levels import HUMAN


def configure_logging(config: LoggingConfig, quiet: bool = False) -> None:
    """Configure the three logging pipelines.

    Args:
        config: Logging configuration (level, file, verbose)
        quiet: If True, disables the human and console handlers
    """
    logging.root.handlers.clear()
    structlog.reset_defaults()

    # Root logger captures everything; handlers filter by level
    logging.root.setLevel(logging.DEBUG)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    # ── Pipeline 1: JSON file ─────────────────────────────────────────────
    if config.file:
        file_path = Path(config.file)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(str(file_path), encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
                foreign_pre_chain=shared_processors,
            )
        )
        logging.root.addHandler(file_handler)

    if quiet:
        # Keeps logging.lastResort from printing warnings to stderr
        logging.root.addHandler(logging.NullHandler())
    else:
        level = _level_value(config.level)

        # ── Pipeline 2: Human handler ─────────────────────────────────────
        if level <= HUMAN:
            human_handler = HumanLogHandler(stream=sys.stderr)
            human_handler.setLevel(HUMAN)
            human_handler.addFilter(lambda record: record.levelno == HUMAN)
            logging.root.addHandler(human_handler)

        # ── Pipeline 3: Technical console ─────────────────────────────────
        # debug/info lower the -v threshold, warn/error raise it
        console_level = _verbose_to_level(config.verbose)
        if level < HUMAN:
            console_level = min(console_level, level)
        elif level > HUMAN:
            console_level = max(console_level, level)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(console_level)
        console_handler.addFilter(lambda record: record.levelno != HUMAN)
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
                foreign_pre_chain=shared_processors,
            )
        )
        logging.root.addHandler(console_handler)

    structlog.configure(
        processors=shared_processors + [
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _level_value(level: str) -> int:
    """Map a configured level name to its logging number."""
    levels = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "human": HUMAN,
        "warn": logging.WARNING,
        "error": logging.ERROR,
    }
    return levels.get(level, HUMAN)


def _verbose_to_level(verbose: int) -> int:
    """Convert the -v count to the console handler level.

    No -v  -> WARNING (problems only; human events have their own handler)
    -v     -> INFO
    -vv+   -> DEBUG
    """
    levels = {
        0: logging.WARNING,
        1: logging.INFO,
        2: logging.DEBUG,
    }
    return levels.get(verbose, logging.DEBUG)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger (usually with __name__).

    The logger always wraps the stdlib logger called name, so HUMAN events
    go through stdlib logging even before configure_logging() runs.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
