from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from tagchain.config import CONFIG_ENV_VAR, Config, ConfigError, load_config


def _write_config(tmp_path: Path, content: str) -> Path:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(textwrap.dedent(content), encoding="utf-8")
    return config_path


def test_load_config_success(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path,
        f"""
        rootdir: {tmp_path}/state
        training:
          epochs: 8
          seed: 42
        logging:
          level: DEBUG
          debug_file: true
        """,
    )

    config = load_config(config_path)

    assert config.root_dir == tmp_path / "state"
    assert config.training.epochs == 8
    assert config.training.seed == 42
    assert config.logging.level == "debug"
    assert config.logging.debug_file is True


def test_empty_file_yields_defaults(tmp_path: Path) -> None:
    config = load_config(_write_config(tmp_path, ""))

    assert config == Config()
    assert config.training.epochs == 5
    assert config.training.seed is None
    assert config.logging.level == "info"


def test_load_config_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path,
        """
        training:
          epochs: 3
        """,
    )

    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_path))
    config = load_config()

    assert config.training.epochs == 3


def test_missing_explicit_config_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "missing.yaml")


def test_missing_env_config_is_an_error(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.yaml"))

    with pytest.raises(ConfigError):
        load_config()


def test_missing_default_config_uses_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    assert load_config() == Config()


@pytest.mark.parametrize(
    "bad_content, expected_message",
    [
        ("- just\n- a list\n", "mapping"),
        ("training: [1, 2]\n", "training must be a mapping"),
        ("training:\n  epochs: 0\n", "epochs"),
        ("training:\n  epochs: true\n", "epochs"),
        ("training:\n  seed: -1\n", "seed"),
        ("logging: verbose\n", "logging must be a mapping"),
        ("rootdir: [unclosed\n", "Invalid YAML"),
    ],
)
def test_invalid_configs(tmp_path: Path, bad_content: str, expected_message: str) -> None:
    config_path = _write_config(tmp_path, bad_content)

    with pytest.raises(ConfigError, match=expected_message):
        load_config(config_path)
