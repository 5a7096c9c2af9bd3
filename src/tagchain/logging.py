"""Logging setup for the tagchain command line."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import typer

from .config import ConfigError, LoggingConfig

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
MAIN_LOG_NAME = "tagchain.log"
DEBUG_LOG_NAME = "debug.log"
MAX_LOG_BYTES = 5_000_000
LOG_BACKUPS = 5
LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class ConsoleFormatter(logging.Formatter):
    """Prefix console messages with a one-letter level marker."""

    MARKERS: dict[int, tuple[str, str]] = {
        logging.DEBUG: ("D", "cyan"),
        logging.INFO: ("I", "green"),
        logging.WARNING: ("!", "yellow"),
        logging.ERROR: ("X", "red"),
        logging.CRITICAL: ("X", "magenta"),
    }

    def __init__(self, use_color: bool) -> None:
        super().__init__("%(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        marker, color = self.MARKERS.get(record.levelno, ("?", "white"))
        if self.use_color:
            marker = typer.style(marker, fg=color)
        return f"{marker} {super().format(record)}"


def configure_logging(logging_config: LoggingConfig, root_dir: Path | None) -> None:
    """Log to stderr, plus rotating files under ``<root>/logs`` when a root is given."""

    level = level_from_string(logging_config.level)
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(ConsoleFormatter(use_color=getattr(sys.stderr, "isatty", bool)()))
    handlers: list[logging.Handler] = [console]

    if root_dir is not None:
        log_dir = root_dir.expanduser() / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(_rotating_handler(log_dir / MAIN_LOG_NAME, logging.INFO))
        if logging_config.debug_file:
            handlers.append(_rotating_handler(log_dir / DEBUG_LOG_NAME, logging.DEBUG))

    logging.basicConfig(level=level, handlers=handlers, force=True)


def level_from_string(level: str) -> int:
    try:
        return LEVELS[level.strip().upper()]
    except KeyError as exc:
        raise ConfigError(f"Unknown log level: {level}") from exc


def _rotating_handler(path: Path, level: int) -> logging.Handler:
    handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


__all__ = ["ConsoleFormatter", "configure_logging", "level_from_string"]
