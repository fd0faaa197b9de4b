"""
LLM Cost Compare.

Compares pricing across large-language-model providers for a usage profile.
"""

from .core.catalog import DEFAULT_CATALOG, ModelPrice, PriceCatalog, ProviderCatalogEntry, UseCaseTemplate
from .core.errors import (
    ModelNotFoundError,
    NotFoundError,
    PricingError,
    ProviderNotFoundError,
    ValidationError,
)
from .core.formatting import format_currency
from .core.formulas import (
    NEVER,
    BreakevenResult,
    SavingsResult,
    calculate_annual_cost,
    calculate_cost_per_1k,
    calculate_savings,
    estimate_breakeven,
)
from .core.pricing import CostResult, PricingEngine
from .core.session import ComparisonSession
from .core.token_counter import estimate_tokens
from .core.usage import UsageLimits, UsageProfile, parse_usage_profile

__all__ = [
    "DEFAULT_CATALOG",
    "NEVER",
    "BreakevenResult",
    "ComparisonSession",
    "CostResult",
    "ModelNotFoundError",
    "ModelPrice",
    "NotFoundError",
    "PriceCatalog",
    "PricingEngine",
    "PricingError",
    "ProviderCatalogEntry",
    "ProviderNotFoundError",
    "SavingsResult",
    "UsageLimits",
    "UsageProfile",
    "UseCaseTemplate",
    "ValidationError",
    "calculate_annual_cost",
    "calculate_cost_per_1k",
    "calculate_savings",
    "estimate_breakeven",
    "estimate_tokens",
    "format_currency",
    "parse_usage_profile",
]
