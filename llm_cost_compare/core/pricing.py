"""
Pricing calculations and provider comparison.

Turns a validated usage profile plus the price catalog into per-model cost
breakdowns and a ranked comparison list.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional, Union

from .catalog import DEFAULT_CATALOG, ModelPrice, PriceCatalog, UseCaseTemplate
from .errors import NotFoundError, ValidationError
from .usage import DEFAULT_LIMITS, UsageLimits, UsageProfile, usage_from_mapping

logger = logging.getLogger(__name__)

TOKENS_PER_MILLION = Decimal("1000000")

UsageInput = Union[UsageProfile, Mapping[str, Any]]


@dataclass(frozen=True)
class CostResult:
    """Cost breakdown for one model over the usage period.

    total_cost is always input_cost + output_cost. cost_per_request is
    total_cost / total_requests, or zero when there are no requests.
    """
    provider_id: str
    model_id: str
    provider_display_name: str
    model_display_name: str
    input_cost: Decimal
    output_cost: Decimal
    total_cost: Decimal
    cost_per_request: Decimal
    total_input_tokens: int
    total_output_tokens: int
    total_requests: int
    context_window_tokens: int
    hardware_cost_note: Optional[str] = None

    @property
    def is_local(self) -> bool:
        """True when the model is self-hosted and needs separate hardware."""
        return self.hardware_cost_note is not None


class PricingEngine:
    """Cost calculator bound to one read-only price catalog.

    The catalog and limits are injected so tests and callers can swap in
    synthetic price tables.
    """

    def __init__(
        self,
        catalog: Optional[PriceCatalog] = None,
        limits: Optional[UsageLimits] = None,
    ):
        """Initialize the engine.

        Args:
            catalog: Price catalog to compute against (defaults to DEFAULT_CATALOG)
            limits: Usage ceilings for raw input (defaults to DEFAULT_LIMITS)
        """
        self.catalog = catalog if catalog is not None else DEFAULT_CATALOG
        self.limits = limits if limits is not None else DEFAULT_LIMITS

    def calculate_model_cost(
        self,
        provider_id: str,
        model_id: str,
        usage: UsageInput,
    ) -> CostResult:
        """Calculate the cost of running one model for a usage profile.

        Args:
            provider_id: Catalog provider identifier
            model_id: Model identifier under that provider
            usage: Validated UsageProfile, or a raw mapping to validate

        Returns:
            CostResult for the model

        Raises:
            ValidationError: If the usage values are invalid or over a ceiling
            ProviderNotFoundError: If the provider is not cataloged
            ModelNotFoundError: If the provider has no such model
        """
        profile = self.resolve_usage(usage)
        model = self.catalog.get_model(provider_id, model_id)
        return self._price(provider_id, model_id, model, profile)

    def compare_providers(
        self,
        usage: UsageInput,
        selected_provider_ids: Optional[Iterable[str]] = None,
    ) -> List[CostResult]:
        """Price every model of the selected providers and rank them.

        ``None`` selects every cataloged provider; an explicit empty
        selection returns an empty list. Unknown providers and models that
        fail to price are logged and skipped rather than failing the batch.

        Args:
            usage: Validated UsageProfile, or a raw mapping to validate
            selected_provider_ids: Providers to include, or None for all

        Returns:
            Results ordered by ascending total_cost; equal costs keep
            catalog order

        Raises:
            ValidationError: If the usage values are invalid
        """
        profile = self.resolve_usage(usage)

        if selected_provider_ids is None:
            provider_ids = list(self.catalog.provider_ids())
        elif isinstance(selected_provider_ids, str):
            raise ValidationError(
                "selected_provider_ids must be a sequence of provider ids, not a string"
            )
        else:
            provider_ids = _unique(selected_provider_ids)

        if not provider_ids:
            logger.debug("No providers selected; returning empty comparison")
            return []

        results = []
        for provider_id in provider_ids:
            try:
                provider = self.catalog.get_provider(provider_id)
            except NotFoundError as e:
                logger.warning("Skipping provider: %s", e)
                continue

            for model_id in provider.models:
                try:
                    results.append(self.calculate_model_cost(provider_id, model_id, profile))
                except (NotFoundError, ValidationError) as e:
                    logger.warning("Error calculating for %s/%s: %s", provider_id, model_id, e)
                except Exception:
                    # Malformed model data must not abort the rest of the batch
                    logger.exception("Unexpected error calculating for %s/%s", provider_id, model_id)

        # sorted() is stable, so equal costs keep encounter order
        return sorted(results, key=lambda result: result.total_cost)

    def resolve_usage(self, usage: UsageInput) -> UsageProfile:
        """Return a validated profile, parsing raw mappings at the boundary."""
        if isinstance(usage, UsageProfile):
            self.limits.check(usage)
            return usage
        if isinstance(usage, Mapping):
            return usage_from_mapping(usage, limits=self.limits)
        raise ValidationError("usage must be a UsageProfile or a mapping of usage values")

    def get_model(self, provider_id: str, model_id: str) -> Optional[ModelPrice]:
        """Look up a model's pricing, or None if it does not exist."""
        if not provider_id or not model_id:
            logger.warning("Invalid input: provider and model_id are required")
            return None
        try:
            return self.catalog.get_model(provider_id, model_id)
        except NotFoundError:
            return None

    def get_provider_models(self, provider_id: str) -> Mapping[str, ModelPrice]:
        """All models for a provider, or an empty mapping if unknown."""
        if not provider_id:
            logger.warning("Invalid input: provider_id is required")
            return {}
        try:
            return self.catalog.get_provider(provider_id).models
        except NotFoundError:
            return {}

    def get_use_case_template(self, use_case_id: str) -> Optional[UseCaseTemplate]:
        """Get a named usage template, or None if unknown."""
        return self.catalog.get_use_case(use_case_id)

    def _price(
        self,
        provider_id: str,
        model_id: str,
        model: ModelPrice,
        profile: UsageProfile,
    ) -> CostResult:
        total_input_tokens = profile.total_input_tokens
        total_output_tokens = profile.total_output_tokens
        total_requests = profile.total_requests

        # Calculate cost: (tokens / 1M) * price_per_million
        input_cost = (Decimal(total_input_tokens) / TOKENS_PER_MILLION) * model.input_price_per_million
        output_cost = (Decimal(total_output_tokens) / TOKENS_PER_MILLION) * model.output_price_per_million
        total_cost = input_cost + output_cost

        if total_requests > 0:
            cost_per_request = total_cost / Decimal(total_requests)
        else:
            cost_per_request = Decimal("0")

        return CostResult(
            provider_id=provider_id,
            model_id=model_id,
            provider_display_name=self.catalog.get_provider(provider_id).display_name,
            model_display_name=model.display_name,
            input_cost=input_cost,
            output_cost=output_cost,
            total_cost=total_cost,
            cost_per_request=cost_per_request,
            total_input_tokens=total_input_tokens,
            total_output_tokens=total_output_tokens,
            total_requests=total_requests,
            context_window_tokens=model.context_window_tokens,
            hardware_cost_note=model.hardware_cost_note,
        )


def _unique(provider_ids: Iterable[str]) -> List[str]:
    """Drop repeated provider ids, keeping first-seen order."""
    seen = set()
    unique = []
    for provider_id in provider_ids:
        if provider_id in seen:
            continue
        seen.add(provider_id)
        unique.append(provider_id)
    return unique
