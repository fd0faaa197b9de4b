"""
Error taxonomy for pricing computations.

Validation failures always abort the single operation. Lookup failures abort
a single-model calculation but are downgraded to skips during comparison.
"""

from typing import Optional


class PricingError(Exception):
    """Base class for all pricing engine errors."""


class ValidationError(PricingError, ValueError):
    """Raised when an input value or catalog entry is malformed."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(PricingError, LookupError):
    """Raised when a provider or model identifier is not in the catalog."""


class ProviderNotFoundError(NotFoundError):
    def __init__(self, provider_id: str):
        super().__init__(f"Provider {provider_id} not found")
        self.provider_id = provider_id


class ModelNotFoundError(NotFoundError):
    def __init__(self, provider_id: str, model_id: str):
        super().__init__(f"Model {model_id} not found for provider {provider_id}")
        self.provider_id = provider_id
        self.model_id = model_id
