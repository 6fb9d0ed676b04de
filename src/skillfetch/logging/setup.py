"""
Complete configuration of the structured logging system.

Three independent pipelines:
1. File (JSON) -- if config.file is set. Captures everything (DEBUG+).
2. Human handler (stderr) -- HUMAN events only: what the installer does.
3. Technical console (stderr) -- DEBUG/INFO, controlled by -v. Excludes HUMAN.

Default behavior (no -v):
- The user only sees HUMAN progress lines and warnings.

With -v: adds INFO. With -vv: adds DEBUG. With --quiet: silences all of it.
"""

import logging
import sys
from pathlib import Path

import structlog

from ..config.schema import LoggingConfig
from .human import HumanLogHandler
from .levels import HUMAN

# logging.level values that still show progress lines
_HUMAN_VISIBLE_LEVELS = ("debug", "info", "human")


def configure_logging(
    config: LoggingConfig,
    quiet: bool = False,
) -> None:
    """Configure the complete logging system with three pipelines.

    Args:
        config: Logging configuration (level, file, verbose)
        quiet: If True, disables the human and console handlers (--quiet)
    """
    # Clear previous configuration
    logging.root.handlers.clear()
    structlog.reset_defaults()

    # Root logger captures everything -- handlers filter by level
    logging.root.setLevel(logging.DEBUG)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    show_human = not quiet and config.level in _HUMAN_VISIBLE_LEVELS
    show_console = not quiet

    # ── Pipeline 1: JSON file ────────────────────────────────────────────
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

    # ── Pipeline 2: Human handler ────────────────────────────────────────
    if show_human:
        human_handler = HumanLogHandler(stream=sys.stderr)
        # Exactly HUMAN (25), not INFO or DEBUG
        human_handler.setLevel(HUMAN)
        human_handler.addFilter(lambda record: record.levelno == HUMAN)
        logging.root.addHandler(human_handler)

    # ── Pipeline 3: Technical console ────────────────────────────────────
    if show_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(_console_level(config))
        # HUMAN events are already shown by the human handler
        console_handler.addFilter(lambda record: record.levelno != HUMAN)
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.dev.ConsoleRenderer(
                    colors=sys.stderr.isatty(),
                ),
                foreign_pre_chain=shared_processors,
            )
        )
        logging.root.addHandler(console_handler)

    # --quiet without a file: keep logging.lastResort from printing warnings
    if not logging.root.handlers:
        logging.root.addHandler(logging.NullHandler())

    # ── Configure structlog ──────────────────────────────────────────────
    # Event dicts are rendered per handler by ProcessorFormatter
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


def _console_level(config: LoggingConfig) -> int:
    """Level for the technical console handler.

    No -v  -> WARNING (only problems; human goes through its own handler)
    -v     -> INFO
    -vv+   -> DEBUG

    logging.level "error" raises the floor to ERROR when no -v is given.
    """
    levels = {
        0: logging.WARNING,
        1: logging.INFO,
        2: logging.DEBUG,
    }
    level = levels.get(config.verbose, logging.DEBUG)
    if config.verbose == 0 and config.level == "error":
        level = logging.ERROR
    return level


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger.

    Args:
        name: Logger name (usually __name__)

    Returns:
        structlog structured logger
    """
    return structlog.get_logger(name)
