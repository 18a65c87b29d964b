"""Tests for configuration loading (config.py)."""

from __future__ import annotations

from pathlib import Path

import pytest

from kanban_sync.config import ServerConfig, load_config
from kanban_sync.errors import ConfigError


class TestLoadConfig:
    def test_defaults(self) -> None:
        config = load_config(environ={})
        assert config == ServerConfig()
        assert config.failure_rate == 0.1
        assert config.default_delay_ms("update") == 400
        assert config.default_delay_ms("list") == 0

    def test_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "kanban_sync.yaml"
        path.write_text("server:\n  failure_rate: 0.25\n  update_delay_ms: 50\n  seed: false\n", encoding="utf-8")
        config = load_config(path, environ={})
        assert config.failure_rate == 0.25
        assert config.update_delay_ms == 50
        assert config.seed is False

    def test_env_overrides_file(self, tmp_path: Path) -> None:
        path = tmp_path / "kanban_sync.yaml"
        path.write_text("server:\n  failure_rate: 0.25\n", encoding="utf-8")
        env = {"KANBAN_SYNC_FAILURE_RATE": "0.5", "KANBAN_SYNC_TEST_MODE": "yes", "OTHER": "x"}
        config = load_config(path, environ=env)
        assert config.failure_rate == 0.5
        assert config.test_mode is True

    def test_test_mode_zeroes_delays(self) -> None:
        config = ServerConfig(test_mode=True)
        assert [config.default_delay_ms(i) for i in ("list", "create", "update", "delete")] == [0, 0, 0, 0]

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path, environ={}) == ServerConfig()

    @pytest.mark.parametrize(
        "env",
        [
            {"KANBAN_SYNC_FAILURE_RATE": "2"},
            {"KANBAN_SYNC_FAILURE_RATE": "often"},
            {"KANBAN_SYNC_UPDATE_DELAY_MS": "-1"},
            {"KANBAN_SYNC_TEST_MODE": "perhaps"},
        ],
    )
    def test_invalid_env(self, env: dict[str, str]) -> None:
        with pytest.raises(ConfigError):
            load_config(environ=env)

    def test_unknown_file_key(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("server:\n  colour: blue\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Unknown server setting"):
            load_config(path, environ={})

    def test_non_mapping_file(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path, environ={})
