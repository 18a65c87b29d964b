"""Load server configuration from an optional YAML file and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .constants import (
    DEFAULT_CREATE_DELAY_MS,
    DEFAULT_DELETE_DELAY_MS,
    DEFAULT_FAILURE_RATE,
    DEFAULT_LIST_DELAY_MS,
    DEFAULT_UPDATE_DELAY_MS,
    ENV_PREFIX,
)
from .errors import ConfigError


@dataclass(frozen=True)
class ServerConfig:
    """Settings for the simulated backend.

    ``test_mode`` zeroes the default delays and disables random faults;
    explicit per-request ``delay``/``error`` overrides still apply.
    """

    failure_rate: float = DEFAULT_FAILURE_RATE
    list_delay_ms: int = DEFAULT_LIST_DELAY_MS
    create_delay_ms: int = DEFAULT_CREATE_DELAY_MS
    update_delay_ms: int = DEFAULT_UPDATE_DELAY_MS
    delete_delay_ms: int = DEFAULT_DELETE_DELAY_MS
    test_mode: bool = False
    seed: bool = True
    log_level: str = "INFO"

    def default_delay_ms(self, intent: str) -> int:
        if self.test_mode:
            return 0
        return {
            "list": self.list_delay_ms,
            "create": self.create_delay_ms,
            "update": self.update_delay_ms,
            "delete": self.delete_delay_ms,
        }[intent]


_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(key: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"{key}: expected a boolean, got {raw!r}")


def _coerce(key: str, expected: type, raw: Any) -> Any:
    if expected is bool:
        return _parse_bool(key, raw)
    try:
        value = expected(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key}: expected {expected.__name__}, got {raw!r}") from exc
    if key == "failure_rate" and not 0.0 <= value <= 1.0:
        raise ConfigError(f"failure_rate must be between 0 and 1, got {value}")
    if key.endswith("_delay_ms") and value < 0:
        raise ConfigError(f"{key} must not be negative, got {value}")
    return value


def _apply(config: ServerConfig, values: Mapping[str, Any]) -> ServerConfig:
    types = {f.name: type(getattr(config, f.name)) for f in fields(config)}
    changes: dict[str, Any] = {}
    for key, raw in values.items():
        if key not in types:
            raise ConfigError(f"Unknown server setting: {key}")
        changes[key] = _coerce(key, types[key], raw)
    return replace(config, **changes)


def _load_file(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    server = data.get("server", {})
    if not isinstance(server, dict):
        raise ConfigError(f"{path}: 'server' must be a mapping")
    return server


def load_config(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ServerConfig:
    """Build a :class:`ServerConfig`.

    Args:
        path: Optional YAML file with a top-level ``server:`` mapping.
        environ: Environment to read ``KANBAN_SYNC_*`` overrides from
            (defaults to ``os.environ``).

    Returns:
        Defaults, overlaid with file values, overlaid with environment values.
    """
    config = ServerConfig()
    if path is not None:
        config = _apply(config, _load_file(path))

    env = os.environ if environ is None else environ
    known = {f.name for f in fields(ServerConfig)}
    overrides = {}
    for key, raw in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX):].lower()
        if name in known:
            overrides[name] = raw
    return _apply(config, overrides)
