"""Tests for finstate.core.config."""

import json
import os

import pytest
import yaml

from finstate.core.config import Config, get_config, reset_config
from finstate.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def _reset_singleton():
    """Reset config singleton between tests."""
    reset_config()
    yield
    reset_config()


class TestConfig:
    def test_defaults(self):
        config = Config()
        assert config.get("projection.horizon_years") == 10
        assert config.get("projection.default_inflation_rate") == 3.0
        assert config.get("ledger.quantity_tolerance") == 1e-8
        assert config.get("paths.data_dir").endswith(".finstate-data")

    def test_custom_data_dir(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        assert config.get("paths.data_dir") == tmp_dir
        assert config.get("paths.store_file") == os.path.join(tmp_dir, "store.json")

    def test_yaml_config_file(self, tmp_config_file):
        config = Config(config_file=tmp_config_file)
        assert config.get("projection.horizon_years") == 5
        assert config.get("projection.default_inflation_rate") == 2.5
        # Untouched keys keep their defaults
        assert config.get("projection.default_income_growth_rate") == 3.0

    def test_json_config_file(self, tmp_dir):
        path = os.path.join(tmp_dir, "config.json")
        with open(path, "w") as f:
            json.dump({"ledger": {"cost_basis_tolerance": 0.5}}, f)
        config = Config(config_file=path)
        assert config.get("ledger.cost_basis_tolerance") == 0.5

    def test_missing_file_raises(self, tmp_dir):
        with pytest.raises(ConfigurationError, match="not found"):
            Config(config_file=os.path.join(tmp_dir, "nope.yaml"))

    def test_non_mapping_file_raises(self, tmp_dir):
        path = os.path.join(tmp_dir, "config.yaml")
        with open(path, "w") as f:
            yaml.dump([1, 2, 3], f)
        with pytest.raises(ConfigurationError, match="mapping"):
            Config(config_file=path)

    def test_env_overrides_file(self, tmp_config_file, monkeypatch):
        monkeypatch.setenv("FINSTATE_PROJECTION__HORIZON_YEARS", "15")
        config = Config(config_file=tmp_config_file)
        assert config.get("projection.horizon_years") == "15"
        assert config.validated().projection.horizon_years == 15

    def test_custom_env_prefix(self, monkeypatch):
        monkeypatch.setenv("MYAPP_LOGGING__LEVEL", "debug")
        config = Config(env_prefix="MYAPP_")
        assert config.get("logging.level") == "debug"
        assert config.validated().logging.level == "DEBUG"

    def test_get_missing_returns_default(self):
        config = Config()
        assert config.get("nope.nothing", "fallback") == "fallback"

    def test_set_creates_intermediate(self):
        config = Config()
        config.set("custom.nested.value", 42)
        assert config.get("custom.nested.value") == 42

    def test_extra_defaults(self):
        config = Config(defaults={"projection": {"horizon_years": 20}})
        assert config.get("projection.horizon_years") == 20


class TestValidated:
    def test_defaults_validate(self):
        validated = Config().validated()
        assert validated.projection.horizon_years == 10
        assert validated.ledger.quantity_tolerance == 1e-8
        assert validated.logging.level == "WARNING"

    def test_invalid_horizon_raises(self):
        config = Config()
        config.set("projection.horizon_years", 0)
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            config.validated()

    def test_invalid_tolerance_raises(self):
        config = Config()
        config.set("ledger.quantity_tolerance", -1)
        with pytest.raises(ConfigurationError):
            config.validated()

    def test_unknown_log_level_raises(self):
        config = Config()
        config.set("logging.level", "LOUD")
        with pytest.raises(ConfigurationError):
            config.validated()


class TestSingleton:
    def test_get_config_returns_same_instance(self):
        assert get_config() is get_config()

    def test_reset_config(self):
        first = get_config()
        reset_config()
        assert get_config() is not first
