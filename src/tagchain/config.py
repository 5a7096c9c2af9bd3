"""Configuration loading and validation."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .taggers.perceptron import DEFAULT_EPOCHS

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.config/tagchain/config.yaml")
DEFAULT_ROOT_DIR = Path("~/.local/lib/tagchain")
DEFAULT_LOG_LEVEL = "info"
CONFIG_ENV_VAR = "TAGCHAIN_CONFIG"


class ConfigError(ValueError):
    """Raised when configuration is invalid or missing."""


@dataclass(frozen=True)
class LoggingConfig:
    """Logging-related configuration."""

    level: str = DEFAULT_LOG_LEVEL
    debug_file: bool = False


@dataclass(frozen=True)
class TrainingConfig:
    """Defaults for perceptron training runs."""

    epochs: int = DEFAULT_EPOCHS
    seed: int | None = None


@dataclass(frozen=True)
class Config:
    """Fully parsed configuration."""

    root_dir: Path = field(default_factory=lambda: DEFAULT_ROOT_DIR.expanduser())
    training: TrainingConfig = field(default_factory=TrainingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: Path | str | None = None) -> Config:
    """Load and validate configuration from YAML.

    A missing file at the default location yields the default configuration;
    a missing file that was asked for explicitly is an error.
    """

    config_path, explicit = _resolve_config_path(path)
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {config_path}")
        LOGGER.debug("No config file at %s; using defaults", config_path)
        return Config()

    with config_path.open("r", encoding="utf-8") as handle:
        try:
            raw = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Configuration root must be a mapping.")

    return _parse_config(raw)


def _resolve_config_path(explicit: Path | str | None) -> tuple[Path, bool]:
    if explicit:
        return Path(explicit).expanduser(), True
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser(), True
    return DEFAULT_CONFIG_PATH.expanduser(), False


def _parse_config(raw: dict[str, Any]) -> Config:
    root_dir = Path(raw.get("rootdir") or raw.get("root_dir") or DEFAULT_ROOT_DIR).expanduser()
    return Config(
        root_dir=root_dir,
        training=_parse_training(raw.get("training")),
        logging=_parse_logging(raw.get("logging")),
    )


def _parse_training(value: Any) -> TrainingConfig:
    if value is None:
        return TrainingConfig()
    if not isinstance(value, dict):
        raise ConfigError("training must be a mapping.")
    epochs = value.get("epochs", DEFAULT_EPOCHS)
    if not isinstance(epochs, int) or isinstance(epochs, bool) or epochs < 1:
        raise ConfigError("training.epochs must be a positive integer.")
    seed = value.get("seed")
    if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool) or seed < 0):
        raise ConfigError("training.seed must be a non-negative integer.")
    return TrainingConfig(epochs=epochs, seed=seed)


def _parse_logging(value: Any) -> LoggingConfig:
    if value is None:
        return LoggingConfig()
    if not isinstance(value, dict):
        raise ConfigError("logging must be a mapping.")
    level = str(value.get("level", DEFAULT_LOG_LEVEL)).lower()
    debug_file = bool(value.get("debug_file", False))
    return LoggingConfig(level=level, debug_file=debug_file)


__all__ = [
    "CONFIG_ENV_VAR",
    "Config",
    "ConfigError",
    "LoggingConfig",
    "TrainingConfig",
    "load_config",
]
