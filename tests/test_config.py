"""Tests for session configuration."""

import json

import pytest

from mdtasks.config import Config, load_config
from mdtasks.errors import ConfigError


def test_defaults():
    config = Config()
    assert config.width == 40
    assert config.top_height == 10
    assert config.update_interval == 1000
    assert config.git_integration is False
    assert config.update_interval_seconds == 1.0


def test_from_mapping_merges_over_defaults():
    config = Config.from_mapping({"update_interval": 500, "git_integration": True})
    assert config.update_interval == 500
    assert config.git_integration is True
    assert config.width == 40


def test_from_mapping_rejects_unknown_keys():
    with pytest.raises(ConfigError, match="colour"):
        Config.from_mapping({"colour": "red"})


@pytest.mark.parametrize(
    "opts",
    [
        {"width": 0},
        {"update_interval": -5},
        {"top_height": "half"},
        {"top_height": 0},
        {"git_integration": "yes"},
        {"width": True},
        {"update_interval": False},
        {"top_height": True},
    ],
)
def test_invalid_values(opts):
    with pytest.raises(ConfigError):
        Config.from_mapping(opts)


def test_resolve_top_height():
    assert Config(top_height=12).resolve_top_height(100) == 12
    assert Config(top_height="30%").resolve_top_height(50) == 15
    assert Config(top_height="1%").resolve_top_height(10) == 1


def test_merged():
    assert Config().merged(git_integration=True).git_integration is True


def test_load_config(tmp_path):
    f = tmp_path / "mdtasks.json"
    f.write_text(json.dumps({"width": 60, "top_height": "40%"}), encoding="utf-8")
    config = load_config(f)
    assert config.width == 60
    assert config.top_height == "40%"


def test_load_config_bad_json(tmp_path):
    f = tmp_path / "mdtasks.json"
    f.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(f)


def test_load_config_missing(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.json")


def test_load_config_rejects_boolean_sizes(tmp_path):
    f = tmp_path / "mdtasks.json"
    f.write_text('{"width": true}', encoding="utf-8")
    with pytest.raises(ConfigError, match="width"):
        load_config(f)
