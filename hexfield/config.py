from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from .log_setup import resolve_level

ENV_PREFIX = "HEXFIELD__"
DEFAULT_CONFIG_PATH = "hexfield.yaml"


class ConfigError(ValueError):
    pass


@dataclass
class StorageConfig:
    db_path: str = "templates.db"


@dataclass
class LoggingConfig:
    level: str = "INFO"
    log_dir: str = "logs"
    # None disables the file handler
    log_file: str | None = None


@dataclass
class UiConfig:
    # Width of the rows added by "Add field" (start advances by the same amount)
    default_field_length: int = 8
    window_width: int = 1100
    window_height: int = 750
    font_size: int = 10


@dataclass
class AppConfig:
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    ui: UiConfig = field(default_factory=UiConfig)


_SECTIONS = {
    "storage": StorageConfig,
    "logging": LoggingConfig,
    "ui": UiConfig,
}


# Field annotation -> (type, None allowed). Annotations are strings here.
_FIELD_TYPES = {
    "str": (str, False),
    "int": (int, False),
    "str | None": (str, True),
}


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigError("Config root must be a mapping")
        return data


def coerce_env_value(value: str, annotation: str = "str") -> Any:
    """Environment text -> value for a field annotated `annotation`."""
    # None is only accepted by Optional fields, see _check_types
    if value.strip().lower() in ("none", "null", ""):
        return None
    if annotation == "int":
        try:
            return int(value.strip())
        except ValueError:
            # left as text, rejected by the type check
            return value
    return value


def _check_types(name: str, cls: type, raw: dict[str, Any]) -> None:
    for f in fields(cls):
        if f.name not in raw:
            continue
        value = raw[f.name]
        expected, optional = _FIELD_TYPES[f.type]
        if value is None and optional:
            continue
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ConfigError(f"'{name}.{f.name}' must be {f.type}, got {value!r}")


def _build_section(name: str, raw: Any) -> Any:
    cls = _SECTIONS[name]
    if raw is None:
        return cls()
    if not isinstance(raw, dict):
        raise ConfigError(f"Config section '{name}' must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = set(raw) - known
    if unknown:
        raise ConfigError(f"Unknown key(s) in '{name}': {', '.join(sorted(unknown))}")
    _check_types(name, cls, raw)
    return cls(**raw)


def load_config(path_str: str | None = None, environ: dict[str, str] | None = None) -> AppConfig:
    """
    Build an AppConfig from a YAML file plus environment overrides.

    A missing file is not an error; defaults are used. Environment variables
    named HEXFIELD__SECTION__KEY override file values, e.g.
    HEXFIELD__STORAGE__DB_PATH=/tmp/t.db
    """
    path = Path(path_str or DEFAULT_CONFIG_PATH)
    raw: dict[str, Any] = _read_yaml(path)

    env = os.environ if environ is None else environ
    for k, v in env.items():
        if not k.startswith(ENV_PREFIX):
            continue
        parts = k[len(ENV_PREFIX):].split("__")
        if len(parts) != 2:
            continue
        section, key = parts[0].lower(), parts[1].lower()
        if section not in _SECTIONS:
            continue
        annotations = {f.name: f.type for f in fields(_SECTIONS[section])}
        section_raw = raw.setdefault(section, {})
        if isinstance(section_raw, dict):
            section_raw[key] = coerce_env_value(v, annotations.get(key, "str"))

    unknown_sections = set(raw) - set(_SECTIONS)
    if unknown_sections:
        raise ConfigError(f"Unknown config section(s): {', '.join(sorted(unknown_sections))}")

    try:
        config = AppConfig(
            storage=_build_section("storage", raw.get("storage")),
            logging=_build_section("logging", raw.get("logging")),
            ui=_build_section("ui", raw.get("ui")),
        )
    except TypeError as e:
        raise ConfigError(str(e)) from e

    try:
        resolve_level(config.logging.level)
    except ValueError as e:
        raise ConfigError(f"logging.level: {e}") from e
    return config
