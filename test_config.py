"""
Test the configuration manager.
"""

import json

import pytest
import yaml

from landcover_cart.config import ConfigManager, DEFAULT_CONFIG
from landcover_cart.exceptions import ConfigurationError


def test_defaults():
    """Defaults are loaded and valid."""
    config = ConfigManager()
    assert config.get("split.seed") == 42
    assert config.get("split.train_fraction") == 0.7
    assert config.get("data.year") == 2018
    assert config.get("data.bounds") == [-130, 24, -65, 50]
    assert config.get("visualization.query_radius_m") == 9000
    assert config.validate_config()


def test_dict_merge_keeps_other_keys():
    config = ConfigManager({"split": {"seed": 7}, "ml": {"cart": {"max_depth": 5}}})
    assert config.get("split.seed") == 7
    assert config.get("split.train_fraction") == 0.7
    assert config.get("ml.cart.max_depth") == 5
    assert config.get("ml.cart.criterion") == "gini"


def test_defaults_are_not_mutated():
    config = ConfigManager()
    config.set("ml.predictors", ["NDVI"])
    config.config["data"]["year"] = 1999
    assert DEFAULT_CONFIG["ml"]["predictors"][0] == "NDVI"
    assert len(DEFAULT_CONFIG["ml"]["predictors"]) == 8
    assert config.get("data.year") == 2018


def test_get_set_dot_notation():
    config = ConfigManager()
    config.set("output.output_directory", "/tmp/out")
    assert config.get("output.output_directory") == "/tmp/out"
    assert config.get("does.not.exist", "fallback") == "fallback"


def test_yaml_and_json_files(tmp_path):
    yaml_path = tmp_path / "config.yaml"
    yaml_path.write_text(yaml.safe_dump({"data": {"year": 2019}}))
    assert ConfigManager(yaml_path).get("data.year") == 2019

    json_path = tmp_path / "config.json"
    json_path.write_text(json.dumps({"encoding": {"order": "sorted"}}))
    assert ConfigManager(str(json_path)).get("encoding.order") == "sorted"


def test_save_config_round_trip(tmp_path):
    config = ConfigManager({"split": {"seed": 3}})
    path = tmp_path / "saved.yaml"
    config.save_config(path, format="yaml")
    assert ConfigManager(path).get("split.seed") == 3


def test_environment_variable(tmp_path, monkeypatch):
    path = tmp_path / "env.json"
    path.write_text(json.dumps({"data": {"year": 2020}}))
    monkeypatch.setenv("LANDCOVER_CART_CONFIG", str(path))
    assert ConfigManager().get("data.year") == 2020


def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigurationError):
        ConfigManager(tmp_path / "missing.yaml")


def test_invalid_file_raises(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(ConfigurationError):
        ConfigManager(path)


@pytest.mark.parametrize("override", [
    {"split": {"train_fraction": 1.5}},
    {"split": {"seed": "abc"}},
    {"data": {"bounds": [10, 0, -10, 5]}},
    {"data": {"missing_predictors": "impute"}},
    {"encoding": {"order": "random"}},
    {"ml": {"predictors": []}},
    {"visualization": {"query_radius_m": 0}},
    {"visualization": {"legend_position": "middle"}},
])
def test_validation_errors(override):
    config = ConfigManager(override)
    assert not config.validate_config()
    assert config.validation_errors()
    with pytest.raises(ConfigurationError):
        config.require_valid()
