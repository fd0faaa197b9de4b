"""
Unit tests for configuration loading and validation.

Tests strict validation and error handling for catalog and engine configs.
"""

import os
import tempfile
from decimal import Decimal

import pytest
import yaml

from llm_cost_compare.config.loader import (
    BreakevenSettings,
    EngineConfig,
    load_catalog,
    load_engine_config,
)
from llm_cost_compare.core.errors import ValidationError
from llm_cost_compare.core.usage import UsageLimits


class ConfigFileTest:
    """Shared temp-directory helpers."""

    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        """Clean up test environment."""
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write_config(self, config_data, filename: str = "config.yaml") -> str:
        """Write configuration data to temporary file."""
        config_path = os.path.join(self.temp_dir, filename)
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_data, f)
        return config_path

    def _write_raw(self, content: str, filename: str = "config.yaml") -> str:
        config_path = os.path.join(self.temp_dir, filename)
        with open(config_path, 'w', encoding='utf-8') as f:
            f.write(content)
        return config_path


class TestCatalogLoading(ConfigFileTest):
    """Test price catalog loading."""

    def test_valid_catalog_loads_correctly(self):
        """Test that a valid catalog loads correctly."""
        path = self._write_config({
            "providers": {
                "acme": {
                    "display_name": "Acme AI",
                    "models": {
                        "rocket": {
                            "display_name": "Rocket",
                            "input_price_per_million": 2.5,
                            "output_price_per_million": 10,
                            "context_window_tokens": 64000,
                        },
                        "garage": {
                            "display_name": "Garage (Local)",
                            "input_price_per_million": 0,
                            "output_price_per_million": 0,
                            "context_window_tokens": 4096,
                            "hardware_cost_note": "One GPU",
                        },
                    },
                },
            },
            "use_cases": {
                "chat": {
                    "display_name": "Chat",
                    "avg_input_tokens": 100,
                    "avg_output_tokens": 50,
                    "requests_per_day": 10,
                },
            },
        })

        catalog = load_catalog(path)

        rocket = catalog.get_model("acme", "rocket")
        assert rocket.input_price_per_million == Decimal("2.5")
        assert rocket.output_price_per_million == Decimal("10")
        assert rocket.context_window_tokens == 64000
        assert catalog.get_model("acme", "garage").hardware_cost_note == "One GPU"
        assert catalog.get_use_case("chat").requests_per_day == 10

    def test_catalog_without_use_cases(self):
        path = self._write_config({
            "providers": {"acme": {"display_name": "Acme", "models": {}}},
        })
        catalog = load_catalog(path)
        assert catalog.provider_ids() == ("acme",)
        assert dict(catalog.use_cases) == {}

    def test_missing_providers_section(self):
        path = self._write_config({"use_cases": {}})
        with pytest.raises(ValidationError, match="Missing required 'providers' section"):
            load_catalog(path)

    def test_unknown_top_level_key(self):
        path = self._write_config({"providers": {}, "currency": "EUR"})
        with pytest.raises(ValidationError, match="Unknown catalog keys"):
            load_catalog(path)

    def test_invalid_model_reports_path(self):
        path = self._write_config({
            "providers": {
                "acme": {
                    "display_name": "Acme",
                    "models": {
                        "rocket": {
                            "display_name": "Rocket",
                            "input_price_per_million": -1,
                            "output_price_per_million": 1,
                            "context_window_tokens": 1,
                        },
                    },
                },
            },
        })
        with pytest.raises(ValidationError, match="providers.acme.models.rocket"):
            load_catalog(path)

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError, match="Catalog file not found"):
            load_catalog(os.path.join(self.temp_dir, "missing.yaml"))

    def test_empty_file(self):
        path = self._write_raw("")
        with pytest.raises(ValidationError, match="empty"):
            load_catalog(path)

    def test_invalid_yaml(self):
        path = self._write_raw("providers: [unclosed\n")
        with pytest.raises(yaml.YAMLError, match="Invalid YAML"):
            load_catalog(path)

    def test_top_level_list_rejected(self):
        path = self._write_raw("- a\n- b\n")
        with pytest.raises(ValidationError, match="mapping"):
            load_catalog(path)


class TestEngineConfigLoading(ConfigFileTest):
    """Test engine limits and breakeven settings."""

    def test_full_config(self):
        path = self._write_config({
            "limits": {
                "max_input_tokens": 1000,
                "max_output_tokens": 2000,
                "max_requests_per_day": 3000,
                "max_period_days": 365,
            },
            "breakeven": {
                "monthly_operating_cost": 150.5,
                "max_months": 120,
                "payback_threshold_months": 36,
            },
        })

        config = load_engine_config(path)

        assert config.limits == UsageLimits(1000, 2000, 3000, 365)
        assert config.breakeven.monthly_operating_cost == 150.5
        assert config.breakeven.max_months == 120
        assert config.breakeven.payback_threshold_months == 36

    def test_partial_config_keeps_defaults(self):
        path = self._write_config({"limits": {"max_period_days": 90}})
        config = load_engine_config(path)
        assert config.limits.max_period_days == 90
        assert config.limits.max_input_tokens == 10_000_000
        assert config.breakeven == BreakevenSettings()

    def test_defaults(self):
        config = EngineConfig()
        assert config.limits == UsageLimits()
        assert config.breakeven.monthly_operating_cost == 200
        assert config.breakeven.max_months == 10_000
        assert config.breakeven.payback_threshold_months == 24

    def test_unknown_top_level_key(self):
        path = self._write_config({"limits": {}, "alerts": {}})
        with pytest.raises(ValidationError, match="Unknown configuration keys"):
            load_engine_config(path)

    def test_unknown_limit_key(self):
        path = self._write_config({"limits": {"max_days": 10}})
        with pytest.raises(ValidationError, match="Unknown keys in limits"):
            load_engine_config(path)

    @pytest.mark.parametrize("value", [0, -1, 1.5, "10", True])
    def test_invalid_limit_value(self, value):
        path = self._write_config({"limits": {"max_input_tokens": value}})
        with pytest.raises(ValidationError, match="positive integer"):
            load_engine_config(path)

    def test_negative_operating_cost(self):
        path = self._write_config({"breakeven": {"monthly_operating_cost": -5}})
        with pytest.raises(ValidationError, match="cannot be negative"):
            load_engine_config(path)

    def test_non_numeric_operating_cost(self):
        path = self._write_config({"breakeven": {"monthly_operating_cost": "lots"}})
        with pytest.raises(ValidationError, match="must be a number"):
            load_engine_config(path)

    def test_invalid_max_months(self):
        path = self._write_config({"breakeven": {"max_months": 0}})
        with pytest.raises(ValidationError, match="max_months must be > 0"):
            load_engine_config(path)

    def test_section_must_be_mapping(self):
        path = self._write_config({"limits": [1, 2]})
        with pytest.raises(ValidationError, match="'limits' must be a dictionary"):
            load_engine_config(path)

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError, match="Engine config file not found"):
            load_engine_config(os.path.join(self.temp_dir, "missing.yaml"))
