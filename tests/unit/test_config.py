"""Test configuration models, the configuration store and TOML files."""

import tomllib

import pytest
from pydantic import ValidationError

from chargefit.core.domain.config import (
    ChargeFitConfig,
    OutlierConfig,
    UncertaintyConfig,
    get_config,
    set_config,
    use_config,
)
from chargefit.core.shared.exceptions import ConfigError
from chargefit.io.config import generate_default_config, load_config, save_config


class TestModels:
    def test_defaults(self):
        config = ChargeFitConfig()
        assert config.uncertainty.enabled
        assert config.uncertainty.fraction == 0.05
        assert config.uncertainty.min_value == 1e-20
        assert config.outliers.conservative_threshold == 2.5
        assert config.outliers.lenient_threshold == 3.0
        assert config.outliers.retry_threshold == 4.0
        assert config.output.log_format == "text"

    def test_sample_uncertainty(self):
        assert UncertaintyConfig().sample_uncertainty(200.0) == pytest.approx(10.0)
        assert UncertaintyConfig(min_value=50.0).sample_uncertainty(200.0) == 50.0
        assert UncertaintyConfig(enabled=False).sample_uncertainty(200.0) == 1.0

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            ChargeFitConfig.model_validate({"fitting": {"max_iterations": 10}})

    def test_fraction_range(self):
        with pytest.raises(ValidationError):
            UncertaintyConfig(fraction=0.0)
        with pytest.raises(ValidationError):
            UncertaintyConfig(fraction=1.5)

    def test_threshold_ordering(self):
        with pytest.raises(ValidationError, match="conservative_threshold"):
            OutlierConfig(conservative_threshold=3.5, lenient_threshold=3.0)

    def test_log_format_choices(self):
        with pytest.raises(ValidationError):
            ChargeFitConfig.model_validate({"output": {"log_format": "xml"}})


class TestConfigStore:
    def test_set_returns_previous(self):
        custom = ChargeFitConfig(uncertainty=UncertaintyConfig(fraction=0.2))
        previous = set_config(custom)
        assert get_config() is custom
        set_config(previous)
        assert get_config() is previous

    def test_use_config_restores(self):
        before = get_config()
        custom = ChargeFitConfig(outliers=OutlierConfig(enabled=False))
        with use_config(custom):
            assert get_config() is custom
        assert get_config() is before

    def test_use_config_restores_on_error(self):
        before = get_config()
        with pytest.raises(RuntimeError), use_config(ChargeFitConfig()):
            raise RuntimeError
        assert get_config() is before


class TestTomlFiles:
    def test_default_template_is_valid(self, tmp_path):
        path = tmp_path / "chargefit.toml"
        path.write_text(generate_default_config())
        assert load_config(path) == ChargeFitConfig()

    def test_template_sections(self):
        data = tomllib.loads(generate_default_config())
        assert set(data) == {"uncertainty", "outliers", "output"}

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "saved.toml"
        config = ChargeFitConfig.model_validate(
            {"uncertainty": {"fraction": 0.1}, "output": {"log_format": "json"}}
        )
        save_config(config, path)
        assert load_config(path) == config

    def test_partial_file_uses_defaults(self, tmp_path):
        path = tmp_path / "partial.toml"
        path.write_text("[outliers]\nenabled = false\n")
        config = load_config(path)
        assert not config.outliers.enabled
        assert config.uncertainty.fraction == 0.05

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "absent.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("[uncertainty\nenabled = true\n")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(path)

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "invalid.toml"
        path.write_text("[uncertainty]\nfraction = -1.0\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(path)
