"""Tests for configuration loading."""
from pathlib import Path

import pytest

from xerschedule.config import ConfigError, default_config, load_config


def test_yaml_config_overrides_defaults(tmp_path: Path):
    path = tmp_path / "settings.yaml"
    path.write_text("hours_per_day: 10\nstrict: true\n", encoding="utf-8")

    config = load_config(path)

    assert config["hours_per_day"] == 10.0
    assert config["strict"] is True
    assert config["encoding"] == default_config()["encoding"]


def test_json_config(tmp_path: Path):
    path = tmp_path / "settings.json"
    path.write_text('{"encoding": "cp1252", "max_upload_bytes": 1024}', encoding="utf-8")

    config = load_config(path)

    assert config["encoding"] == "cp1252"
    assert config["max_upload_bytes"] == 1024


def test_empty_yaml_uses_defaults(tmp_path: Path):
    path = tmp_path / "settings.yml"
    path.write_text("", encoding="utf-8")

    assert load_config(path) == default_config()


@pytest.mark.parametrize(
    "text",
    [
        "hours_per_day: 0\n",
        "strict: maybe\n",
        "encoding: not-a-codec\n",
        "colour: blue\n",
        "- just\n- a list\n",
    ],
)
def test_invalid_values_are_rejected(tmp_path: Path, text: str):
    path = tmp_path / "settings.yaml"
    path.write_text(text, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_and_unsupported_files(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.yaml")

    path = tmp_path / "settings.toml"
    path.write_text("strict = true\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)
