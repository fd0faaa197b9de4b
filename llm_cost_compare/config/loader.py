"""
Configuration management and loading.

Loads custom price catalogs and engine limits from YAML files.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

from llm_cost_compare.core.catalog import PriceCatalog
from llm_cost_compare.core.errors import ValidationError
from llm_cost_compare.core.formulas import (
    BREAKEVEN_MAX_MONTHS,
    BREAKEVEN_THRESHOLD_MONTHS,
    DEFAULT_MONTHLY_OPERATING_COST,
)
from llm_cost_compare.core.usage import UsageLimits


@dataclass(frozen=True)
class BreakevenSettings:
    """Tunable thresholds for the local-hosting breakeven estimate."""
    monthly_operating_cost: float = DEFAULT_MONTHLY_OPERATING_COST
    max_months: int = BREAKEVEN_MAX_MONTHS
    payback_threshold_months: int = BREAKEVEN_THRESHOLD_MONTHS

    def __post_init__(self):
        """Validate breakeven thresholds."""
        if self.monthly_operating_cost < 0:
            raise ValidationError("monthly_operating_cost cannot be negative")
        if self.max_months <= 0:
            raise ValidationError("max_months must be > 0")
        if self.payback_threshold_months <= 0:
            raise ValidationError("payback_threshold_months must be > 0")


@dataclass(frozen=True)
class EngineConfig:
    """Complete engine configuration."""
    limits: UsageLimits = field(default_factory=UsageLimits)
    breakeven: BreakevenSettings = field(default_factory=BreakevenSettings)


def load_catalog(path: str) -> PriceCatalog:
    """Load and validate a price catalog from a YAML file.

    Expected layout::

        providers:
          openai:
            display_name: OpenAI
            models:
              gpt-4o:
                display_name: GPT-4o
                input_price_per_million: 2.50
                output_price_per_million: 10.00
                context_window_tokens: 128000
        use_cases:
          chatbot:
            display_name: Customer Support Chatbot
            avg_input_tokens: 500
            avg_output_tokens: 200
            requests_per_day: 1000

    Args:
        path: Path to YAML catalog file

    Returns:
        Validated PriceCatalog

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValidationError: If the catalog is invalid
    """
    raw_config = _read_yaml(path, "Catalog")

    allowed_top_keys = {"providers", "use_cases"}
    unknown_keys = set(raw_config.keys()) - allowed_top_keys
    if unknown_keys:
        raise ValidationError(f"Unknown catalog keys: {unknown_keys}")

    if "providers" not in raw_config:
        raise ValidationError("Missing required 'providers' section")

    return PriceCatalog.from_dict(
        raw_config["providers"] or {},
        raw_config.get("use_cases") or {},
    )


def load_engine_config(path: str) -> EngineConfig:
    """Load and validate engine limits from a YAML file.

    Every section and key is optional; omitted values keep their defaults.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated EngineConfig

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValidationError: If configuration is invalid
    """
    raw_config = _read_yaml(path, "Engine config")

    allowed_top_keys = {"limits", "breakeven"}
    unknown_keys = set(raw_config.keys()) - allowed_top_keys
    if unknown_keys:
        raise ValidationError(f"Unknown configuration keys: {unknown_keys}")

    limits_data = _section(raw_config, "limits")
    _reject_unknown(
        limits_data,
        {"max_input_tokens", "max_output_tokens", "max_requests_per_day", "max_period_days"},
        "limits",
    )
    for key, value in limits_data.items():
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValidationError(f"'{key}' in limits must be a positive integer")

    breakeven_data = _section(raw_config, "breakeven")
    _reject_unknown(
        breakeven_data,
        {"monthly_operating_cost", "max_months", "payback_threshold_months"},
        "breakeven",
    )
    operating_cost = breakeven_data.get("monthly_operating_cost", DEFAULT_MONTHLY_OPERATING_COST)
    if isinstance(operating_cost, bool) or not isinstance(operating_cost, (int, float)):
        raise ValidationError("'monthly_operating_cost' in breakeven must be a number")
    for key in ("max_months", "payback_threshold_months"):
        value = breakeven_data.get(key)
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            raise ValidationError(f"'{key}' in breakeven must be an integer")

    return EngineConfig(
        limits=UsageLimits(**limits_data),
        breakeven=BreakevenSettings(
            monthly_operating_cost=operating_cost,
            max_months=breakeven_data.get("max_months", BREAKEVEN_MAX_MONTHS),
            payback_threshold_months=breakeven_data.get(
                "payback_threshold_months", BREAKEVEN_THRESHOLD_MONTHS
            ),
        ),
    )


def _read_yaml(path: str, label: str) -> Dict[str, Any]:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"{label} file not found: {path}")

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in {label.lower()} file {path}: {e}")

    if not raw_config:
        raise ValidationError(f"{label} file is empty")
    if not isinstance(raw_config, dict):
        raise ValidationError(f"{label} file must contain a mapping at the top level")
    return raw_config


def _section(raw_config: Dict[str, Any], name: str) -> Dict[str, Any]:
    data = raw_config.get(name) or {}
    if not isinstance(data, dict):
        raise ValidationError(f"'{name}' must be a dictionary")
    return data


def _reject_unknown(data: Dict[str, Any], allowed: set, path: str) -> None:
    unknown_keys = set(data.keys()) - allowed
    if unknown_keys:
        raise ValidationError(f"Unknown keys in {path}: {unknown_keys}")
