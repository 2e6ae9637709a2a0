"""Tests for YAML config loading and environment overrides."""
from __future__ import annotations

import pytest
import yaml

from hexfield.config import AppConfig, ConfigError, coerce_env_value, load_config


def test_missing_file_gives_defaults(tmp_path):
    cfg = load_config(str(tmp_path / "nope.yaml"), environ={})
    assert cfg == AppConfig()
    assert cfg.storage.db_path == "templates.db"
    assert cfg.ui.default_field_length == 8
    assert cfg.logging.log_file is None


def test_yaml_values_are_applied(tmp_path):
    path = tmp_path / "hexfield.yaml"
    path.write_text(yaml.dump({
        "storage": {"db_path": "/data/t.db"},
        "logging": {"level": "DEBUG", "log_file": "hexfield.log"},
        "ui": {"default_field_length": 16},
    }))
    cfg = load_config(str(path), environ={})
    assert cfg.storage.db_path == "/data/t.db"
    assert cfg.logging.level == "DEBUG"
    assert cfg.logging.log_file == "hexfield.log"
    assert cfg.ui.default_field_length == 16
    assert cfg.ui.font_size == 10


def test_env_overrides_file(tmp_path):
    path = tmp_path / "hexfield.yaml"
    path.write_text(yaml.dump({"storage": {"db_path": "file.db"}}))
    env = {
        "HEXFIELD__STORAGE__DB_PATH": "env.db",
        "HEXFIELD__UI__WINDOW_WIDTH": "1600",
        "HEXFIELD__BOGUS": "ignored",
        "OTHER__UI__FONT_SIZE": "99",
    }
    cfg = load_config(str(path), environ=env)
    assert cfg.storage.db_path == "env.db"
    assert cfg.ui.window_width == 1600
    assert cfg.ui.font_size == 10


def test_root_must_be_mapping(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError):
        load_config(str(path), environ={})


def test_unknown_key_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text(yaml.dump({"ui": {"colour": "blue"}}))
    with pytest.raises(ConfigError, match="colour"):
        load_config(str(path), environ={})


def test_unknown_section_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text(yaml.dump({"network": {"port": 1}}))
    with pytest.raises(ConfigError):
        load_config(str(path), environ={})


@pytest.mark.parametrize("raw,annotation,expected", [
    ("42", "int", 42),
    (" 7 ", "int", 7),
    ("wide", "int", "wide"),
    ("none", "str | None", None),
    ("", "str | None", None),
    ("none", "str", None),
    ("logs/out", "str", "logs/out"),
    ("true", "str", "true"),
])
def test_coerce_env_value(raw, annotation, expected):
    assert coerce_env_value(raw, annotation) == expected


@pytest.mark.parametrize("env", [
    {"HEXFIELD__LOGGING__LEVEL": "none"},
    {"HEXFIELD__STORAGE__DB_PATH": "none"},
    {"HEXFIELD__STORAGE__DB_PATH": ""},
    {"HEXFIELD__UI__FONT_SIZE": "big"},
])
def test_env_value_of_wrong_type_rejected(tmp_path, env):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "nope.yaml"), environ=env)


def test_env_none_clears_optional_field(tmp_path):
    path = tmp_path / "hexfield.yaml"
    path.write_text(yaml.dump({"logging": {"log_file": "hexfield.log"}}))
    cfg = load_config(str(path), environ={"HEXFIELD__LOGGING__LOG_FILE": "none"})
    assert cfg.logging.log_file is None


@pytest.mark.parametrize("section,key,value", [
    ("ui", "default_field_length", "8"),
    ("ui", "window_width", True),
    ("ui", "font_size", 10.5),
    ("storage", "db_path", None),
    ("storage", "db_path", 5),
    ("logging", "level", None),
])
def test_yaml_value_of_wrong_type_rejected(tmp_path, section, key, value):
    path = tmp_path / "bad.yaml"
    path.write_text(yaml.dump({section: {key: value}}))
    with pytest.raises(ConfigError, match=key):
        load_config(str(path), environ={})


def test_unknown_log_level_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text(yaml.dump({"logging": {"level": "LOUD"}}))
    with pytest.raises(ConfigError, match="LOUD"):
        load_config(str(path), environ={})
