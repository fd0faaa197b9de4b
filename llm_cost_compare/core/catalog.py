"""
Provider price catalog.

Holds the read-only providers -> models -> prices table and the named usage
templates. Catalogs are explicit objects passed to the engine; nothing here
is mutated after construction.
"""

import math
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from .errors import ModelNotFoundError, ProviderNotFoundError, ValidationError
from .usage import DEFAULT_PERIOD_DAYS, UsageLimits, UsageProfile, parse_usage_profile

MODEL_KEYS = {
    "display_name",
    "input_price_per_million",
    "output_price_per_million",
    "context_window_tokens",
    "hardware_cost_note",
}
PROVIDER_KEYS = {"display_name", "models"}
USE_CASE_KEYS = {"display_name", "avg_input_tokens", "avg_output_tokens", "requests_per_day"}


@dataclass(frozen=True)
class ModelPrice:
    """Per-million-token pricing for one model."""
    display_name: str
    input_price_per_million: Decimal
    output_price_per_million: Decimal
    context_window_tokens: int
    hardware_cost_note: Optional[str] = None

    def __post_init__(self):
        """Validate prices and context window."""
        if not isinstance(self.display_name, str) or not self.display_name.strip():
            raise ValidationError("display_name must be a non-empty string", field="display_name")
        for name in ("input_price_per_million", "output_price_per_million"):
            price = getattr(self, name)
            if not isinstance(price, Decimal) or not price.is_finite() or price < 0:
                raise ValidationError(f"{name} must be a non-negative decimal", field=name)
        window = self.context_window_tokens
        if isinstance(window, bool) or not isinstance(window, int) or window <= 0:
            raise ValidationError(
                "context_window_tokens must be a positive integer",
                field="context_window_tokens",
            )
        if self.hardware_cost_note is not None and not isinstance(self.hardware_cost_note, str):
            raise ValidationError("hardware_cost_note must be text", field="hardware_cost_note")

    @property
    def is_local(self) -> bool:
        """True for self-hosted models that need separate hardware."""
        return self.hardware_cost_note is not None


@dataclass(frozen=True)
class ProviderCatalogEntry:
    """A provider and its priced models, in catalog order."""
    display_name: str
    models: Mapping[str, ModelPrice] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.display_name, str) or not self.display_name.strip():
            raise ValidationError("display_name must be a non-empty string", field="display_name")
        models = dict(self.models)
        for model_id, model in models.items():
            if not isinstance(model, ModelPrice):
                raise ValidationError(
                    f"Model {model_id} must be a ModelPrice, got {type(model).__name__}",
                    field="models",
                )
        # Freeze the model table so entries cannot be swapped out later
        object.__setattr__(self, "models", MappingProxyType(models))


@dataclass(frozen=True)
class UseCaseTemplate:
    """Named workload preset used to populate a usage profile."""
    display_name: str
    avg_input_tokens: int
    avg_output_tokens: int
    requests_per_day: int

    def to_usage_profile(
        self,
        period_days: int = DEFAULT_PERIOD_DAYS,
        limits: Optional[UsageLimits] = None,
    ) -> UsageProfile:
        return parse_usage_profile(
            self.avg_input_tokens,
            self.avg_output_tokens,
            self.requests_per_day,
            period_days,
            limits=limits,
        )


@dataclass(frozen=True)
class PriceCatalog:
    """Read-only catalog of providers, models and usage templates."""
    providers: Mapping[str, ProviderCatalogEntry]
    use_cases: Mapping[str, UseCaseTemplate] = field(default_factory=dict)

    def __post_init__(self):
        providers = dict(self.providers)
        use_cases = dict(self.use_cases)
        for provider_id, provider in providers.items():
            if not isinstance(provider, ProviderCatalogEntry):
                raise ValidationError(
                    f"Provider {provider_id} must be a ProviderCatalogEntry, "
                    f"got {type(provider).__name__}",
                    field="providers",
                )
        for use_case_id, template in use_cases.items():
            if not isinstance(template, UseCaseTemplate):
                raise ValidationError(
                    f"Use case {use_case_id} must be a UseCaseTemplate, "
                    f"got {type(template).__name__}",
                    field="use_cases",
                )
        object.__setattr__(self, "providers", MappingProxyType(providers))
        object.__setattr__(self, "use_cases", MappingProxyType(use_cases))

    def provider_ids(self) -> Tuple[str, ...]:
        """Provider identifiers in catalog order."""
        return tuple(self.providers.keys())

    def get_provider(self, provider_id: str) -> ProviderCatalogEntry:
        """Get a provider entry.

        Raises:
            ProviderNotFoundError: If the provider is not cataloged
        """
        try:
            return self.providers[provider_id]
        except (KeyError, TypeError):
            raise ProviderNotFoundError(provider_id) from None

    def get_model(self, provider_id: str, model_id: str) -> ModelPrice:
        """Get pricing for a model under a provider.

        Raises:
            ProviderNotFoundError: If the provider is not cataloged
            ModelNotFoundError: If the provider has no such model
        """
        provider = self.get_provider(provider_id)
        try:
            return provider.models[model_id]
        except (KeyError, TypeError):
            raise ModelNotFoundError(provider_id, model_id) from None

    def iter_models(self) -> Iterator[Tuple[str, str, ModelPrice]]:
        """Yield (provider_id, model_id, price) in catalog order."""
        for provider_id, provider in self.providers.items():
            for model_id, model in provider.models.items():
                yield provider_id, model_id, model

    def get_use_case(self, use_case_id: str) -> Optional[UseCaseTemplate]:
        """Get a usage template, or None if unknown."""
        return self.use_cases.get(use_case_id)

    @classmethod
    def from_dict(
        cls,
        providers: Mapping[str, Any],
        use_cases: Optional[Mapping[str, Any]] = None,
    ) -> "PriceCatalog":
        """Build a catalog from plain nested mappings.

        Args:
            providers: provider_id -> {display_name, models: {model_id -> {...}}}
            use_cases: template_id -> {display_name, avg_input_tokens,
                avg_output_tokens, requests_per_day}

        Returns:
            Validated PriceCatalog

        Raises:
            ValidationError: If any entry is malformed
        """
        if not isinstance(providers, Mapping):
            raise ValidationError("'providers' must be a dictionary")
        parsed_providers = {
            str(provider_id): _parse_provider(data, f"providers.{provider_id}")
            for provider_id, data in providers.items()
        }

        use_cases = use_cases or {}
        if not isinstance(use_cases, Mapping):
            raise ValidationError("'use_cases' must be a dictionary")
        parsed_use_cases = {
            str(use_case_id): _parse_use_case(data, f"use_cases.{use_case_id}")
            for use_case_id, data in use_cases.items()
        }
        return cls(providers=parsed_providers, use_cases=parsed_use_cases)


def _parse_provider(data: Any, path: str) -> ProviderCatalogEntry:
    if not isinstance(data, Mapping):
        raise ValidationError(f"{path} must be a dictionary")
    _reject_unknown_keys(data, PROVIDER_KEYS, path)
    if "display_name" not in data:
        raise ValidationError(f"Missing required 'display_name' in {path}")
    models = data.get("models", {})
    if not isinstance(models, Mapping):
        raise ValidationError(f"'models' in {path} must be a dictionary")
    return ProviderCatalogEntry(
        display_name=str(data["display_name"]),
        models={
            str(model_id): _parse_model(model_data, f"{path}.models.{model_id}")
            for model_id, model_data in models.items()
        },
    )


def _parse_model(data: Any, path: str) -> ModelPrice:
    if not isinstance(data, Mapping):
        raise ValidationError(f"{path} must be a dictionary")
    _reject_unknown_keys(data, MODEL_KEYS, path)
    for key in ("display_name", "input_price_per_million",
                "output_price_per_million", "context_window_tokens"):
        if key not in data:
            raise ValidationError(f"Missing required '{key}' in {path}")

    note = data.get("hardware_cost_note")
    try:
        return ModelPrice(
            display_name=data["display_name"],
            input_price_per_million=_to_price(data["input_price_per_million"]),
            output_price_per_million=_to_price(data["output_price_per_million"]),
            context_window_tokens=data["context_window_tokens"],
            hardware_cost_note=note,
        )
    except ValidationError as e:
        raise ValidationError(f"Invalid model in {path}: {e}", field=e.field) from e


def _parse_use_case(data: Any, path: str) -> UseCaseTemplate:
    if not isinstance(data, Mapping):
        raise ValidationError(f"{path} must be a dictionary")
    _reject_unknown_keys(data, USE_CASE_KEYS, path)
    for key in sorted(USE_CASE_KEYS):
        if key not in data:
            raise ValidationError(f"Missing required '{key}' in {path}")
    for key in ("avg_input_tokens", "avg_output_tokens", "requests_per_day"):
        value = data[key]
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError(f"'{key}' in {path} must be a non-negative integer", field=key)
    return UseCaseTemplate(
        display_name=str(data["display_name"]),
        avg_input_tokens=data["avg_input_tokens"],
        avg_output_tokens=data["avg_output_tokens"],
        requests_per_day=data["requests_per_day"],
    )


def _to_price(value: Any) -> Decimal:
    """Convert a configured price to Decimal without binary float noise."""
    if isinstance(value, bool):
        raise ValidationError("price must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError("price must be finite")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"price must be a number, got {value!r}") from None


def _reject_unknown_keys(data: Mapping, allowed: set, path: str) -> None:
    unknown_keys = set(data.keys()) - allowed
    if unknown_keys:
        raise ValidationError(f"Unknown keys in {path}: {sorted(unknown_keys)}")


# Prices in USD per 1M tokens (September 2025 list prices)
DEFAULT_PROVIDERS: Dict[str, Dict[str, Any]] = {
    "openai": {
        "display_name": "OpenAI",
        "models": {
            "gpt-4o": {
                "display_name": "GPT-4o",
                "input_price_per_million": "2.50",
                "output_price_per_million": "10.00",
                "context_window_tokens": 128_000,
            },
            "gpt-4o-mini": {
                "display_name": "GPT-4o Mini",
                "input_price_per_million": "0.150",
                "output_price_per_million": "0.600",
                "context_window_tokens": 128_000,
            },
            "gpt-4-turbo": {
                "display_name": "GPT-4 Turbo",
                "input_price_per_million": "10.00",
                "output_price_per_million": "30.00",
                "context_window_tokens": 128_000,
            },
            "gpt-4": {
                "display_name": "GPT-4",
                "input_price_per_million": "30.00",
                "output_price_per_million": "60.00",
                "context_window_tokens": 8_192,
            },
            "gpt-3.5-turbo": {
                "display_name": "GPT-3.5 Turbo",
                "input_price_per_million": "0.50",
                "output_price_per_million": "1.50",
                "context_window_tokens": 16_385,
            },
        },
    },
    "anthropic": {
        "display_name": "Anthropic",
        "models": {
            "claude-sonnet-4.5": {
                "display_name": "Claude Sonnet 4.5",
                "input_price_per_million": "3.00",
                "output_price_per_million": "15.00",
                "context_window_tokens": 200_000,
            },
            "claude-3.5-sonnet": {
                "display_name": "Claude 3.5 Sonnet",
                "input_price_per_million": "3.00",
                "output_price_per_million": "15.00",
                "context_window_tokens": 200_000,
            },
            "claude-3-opus": {
                "display_name": "Claude 3 Opus",
                "input_price_per_million": "15.00",
                "output_price_per_million": "75.00",
                "context_window_tokens": 200_000,
            },
            "claude-3-sonnet": {
                "display_name": "Claude 3 Sonnet",
                "input_price_per_million": "3.00",
                "output_price_per_million": "15.00",
                "context_window_tokens": 200_000,
            },
            "claude-3-haiku": {
                "display_name": "Claude 3 Haiku",
                "input_price_per_million": "0.25",
                "output_price_per_million": "1.25",
                "context_window_tokens": 200_000,
            },
        },
    },
    "google": {
        "display_name": "Google",
        "models": {
            "gemini-1.5-pro": {
                "display_name": "Gemini 1.5 Pro",
                "input_price_per_million": "1.25",
                "output_price_per_million": "5.00",
                "context_window_tokens": 2_000_000,
            },
            "gemini-1.5-flash": {
                "display_name": "Gemini 1.5 Flash",
                "input_price_per_million": "0.075",
                "output_price_per_million": "0.30",
                "context_window_tokens": 1_000_000,
            },
            "gemini-pro": {
                "display_name": "Gemini Pro",
                "input_price_per_million": "0.50",
                "output_price_per_million": "1.50",
                "context_window_tokens": 32_000,
            },
        },
    },
    "azure": {
        "display_name": "Azure OpenAI",
        "models": {
            "gpt-4o": {
                "display_name": "GPT-4o (Azure)",
                "input_price_per_million": "5.00",
                "output_price_per_million": "15.00",
                "context_window_tokens": 128_000,
            },
            "gpt-4-turbo": {
                "display_name": "GPT-4 Turbo (Azure)",
                "input_price_per_million": "10.00",
                "output_price_per_million": "30.00",
                "context_window_tokens": 128_000,
            },
            "gpt-35-turbo": {
                "display_name": "GPT-3.5 Turbo (Azure)",
                "input_price_per_million": "0.50",
                "output_price_per_million": "1.50",
                "context_window_tokens": 16_385,
            },
        },
    },
    "mistral": {
        "display_name": "Mistral AI",
        "models": {
            "mistral-large": {
                "display_name": "Mistral Large 24B",
                "input_price_per_million": "2.00",
                "output_price_per_million": "6.00",
                "context_window_tokens": 32_000,
            },
            "mistral-medium": {
                "display_name": "Mistral Medium",
                "input_price_per_million": "0.40",
                "output_price_per_million": "2.00",
                "context_window_tokens": 32_000,
            },
        },
    },
    "local": {
        "display_name": "Local/Self-Hosted",
        "models": {
            "llama-3-70b": {
                "display_name": "Llama 3 70B (Local)",
                "input_price_per_million": "0",
                "output_price_per_million": "0",
                "context_window_tokens": 8_192,
                "hardware_cost_note": "Requires 2x A100 GPUs (~$20k+ investment)",
            },
            "llama-3-8b": {
                "display_name": "Llama 3 8B (Local)",
                "input_price_per_million": "0",
                "output_price_per_million": "0",
                "context_window_tokens": 8_192,
                "hardware_cost_note": "Runs on consumer GPU (~$1-2k)",
            },
            "mixtral-8x7b": {
                "display_name": "Mixtral 8x7B (Local)",
                "input_price_per_million": "0",
                "output_price_per_million": "0",
                "context_window_tokens": 32_000,
                "hardware_cost_note": "Requires high-end GPU (~$3-5k)",
            },
            "custom": {
                "display_name": "Custom Local Model",
                "input_price_per_million": "0",
                "output_price_per_million": "0",
                "context_window_tokens": 8_192,
                "hardware_cost_note": "Varies by model size",
            },
        },
    },
}

DEFAULT_USE_CASES: Dict[str, Dict[str, Any]] = {
    "chatbot": {
        "display_name": "Customer Support Chatbot",
        "avg_input_tokens": 500,
        "avg_output_tokens": 200,
        "requests_per_day": 1000,
    },
    "documentAnalysis": {
        "display_name": "Document Analysis",
        "avg_input_tokens": 3000,
        "avg_output_tokens": 500,
        "requests_per_day": 100,
    },
    "codeGeneration": {
        "display_name": "Code Generation",
        "avg_input_tokens": 800,
        "avg_output_tokens": 600,
        "requests_per_day": 500,
    },
    "ticketClassification": {
        "display_name": "Ticket Classification",
        "avg_input_tokens": 300,
        "avg_output_tokens": 100,
        "requests_per_day": 5000,
    },
    "contentGeneration": {
        "display_name": "Content Generation",
        "avg_input_tokens": 500,
        "avg_output_tokens": 1000,
        "requests_per_day": 200,
    },
    "custom": {
        "display_name": "Custom Use Case",
        "avg_input_tokens": 500,
        "avg_output_tokens": 500,
        "requests_per_day": 1000,
    },
}

# Fixed default catalog - no dynamic fetching
DEFAULT_CATALOG = PriceCatalog.from_dict(DEFAULT_PROVIDERS, DEFAULT_USE_CASES)
