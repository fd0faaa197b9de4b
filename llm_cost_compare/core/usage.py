"""
Usage profile parsing and validation.

This is the single validation boundary for workload numbers. Raw values are
parsed once into an immutable UsageProfile; everything downstream operates on
already-valid data.
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional

from .errors import ValidationError

MAX_INPUT_TOKENS = 10_000_000
MAX_OUTPUT_TOKENS = 10_000_000
MAX_REQUESTS_PER_DAY = 100_000_000
MAX_PERIOD_DAYS = 3_650

DEFAULT_PERIOD_DAYS = 30

USAGE_FIELDS = (
    "input_tokens_per_request",
    "output_tokens_per_request",
    "requests_per_day",
    "period_days",
)


@dataclass(frozen=True)
class UsageLimits:
    """Ceilings that keep scenarios within a sane numeric range."""
    max_input_tokens: int = MAX_INPUT_TOKENS
    max_output_tokens: int = MAX_OUTPUT_TOKENS
    max_requests_per_day: int = MAX_REQUESTS_PER_DAY
    max_period_days: int = MAX_PERIOD_DAYS

    def __post_init__(self):
        """Validate every ceiling is a positive integer."""
        for name in (
            "max_input_tokens",
            "max_output_tokens",
            "max_requests_per_day",
            "max_period_days",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValidationError(f"{name} must be a positive integer", field=name)

    def check(self, profile: "UsageProfile") -> None:
        """Raise ValidationError if the profile exceeds any ceiling."""
        if profile.input_tokens_per_request > self.max_input_tokens:
            raise ValidationError(
                f"Input tokens exceed maximum of {self.max_input_tokens:,}",
                field="input_tokens_per_request",
            )
        if profile.output_tokens_per_request > self.max_output_tokens:
            raise ValidationError(
                f"Output tokens exceed maximum of {self.max_output_tokens:,}",
                field="output_tokens_per_request",
            )
        if profile.requests_per_day > self.max_requests_per_day:
            raise ValidationError(
                f"Requests per day exceed maximum of {self.max_requests_per_day:,}",
                field="requests_per_day",
            )
        if profile.period_days > self.max_period_days:
            raise ValidationError(
                f"Days exceed maximum of {self.max_period_days:,}",
                field="period_days",
            )


DEFAULT_LIMITS = UsageLimits()


@dataclass(frozen=True)
class UsageProfile:
    """Validated workload being costed.

    Build instances with parse_usage_profile() so raw values are coerced and
    checked against the configured ceilings.
    """
    input_tokens_per_request: int
    output_tokens_per_request: int
    requests_per_day: int
    period_days: int = DEFAULT_PERIOD_DAYS

    def __post_init__(self):
        """Validate counts are integers in range."""
        _check_count(self.input_tokens_per_request, "input_tokens_per_request", minimum=0)
        _check_count(self.output_tokens_per_request, "output_tokens_per_request", minimum=0)
        _check_count(self.requests_per_day, "requests_per_day", minimum=0)
        _check_count(self.period_days, "period_days", minimum=1)

    @property
    def total_requests(self) -> int:
        return self.requests_per_day * self.period_days

    @property
    def total_input_tokens(self) -> int:
        return self.input_tokens_per_request * self.total_requests

    @property
    def total_output_tokens(self) -> int:
        return self.output_tokens_per_request * self.total_requests


def parse_usage_profile(
    input_tokens_per_request: Any,
    output_tokens_per_request: Any,
    requests_per_day: Any,
    period_days: Any = DEFAULT_PERIOD_DAYS,
    limits: Optional[UsageLimits] = None,
) -> UsageProfile:
    """Parse raw workload numbers into a validated UsageProfile.

    Checks run in order: numeric type and finiteness for every field, then
    sign, then the ceilings in ``limits``.

    Args:
        input_tokens_per_request: Prompt tokens sent with each request
        output_tokens_per_request: Completion tokens returned per request
        requests_per_day: Daily request volume
        period_days: Horizon in days (must be positive)
        limits: Ceilings to enforce (defaults to DEFAULT_LIMITS)

    Returns:
        Immutable, validated UsageProfile

    Raises:
        ValidationError: If any value is non-numeric, non-finite, fractional,
            negative or above its ceiling
    """
    values = [
        _coerce_integer(input_tokens_per_request, "input_tokens_per_request"),
        _coerce_integer(output_tokens_per_request, "output_tokens_per_request"),
        _coerce_integer(requests_per_day, "requests_per_day"),
        _coerce_integer(period_days, "period_days"),
    ]
    profile = UsageProfile(*values)
    (limits or DEFAULT_LIMITS).check(profile)
    return profile


def usage_from_mapping(
    data: Mapping[str, Any],
    limits: Optional[UsageLimits] = None,
) -> UsageProfile:
    """Parse a plain mapping (as sent by a presentation layer) into a profile."""
    unknown_keys = set(data.keys()) - set(USAGE_FIELDS)
    if unknown_keys:
        raise ValidationError(f"Unknown usage keys: {sorted(unknown_keys)}")
    for name in USAGE_FIELDS[:3]:
        if name not in data:
            raise ValidationError(f"Missing required usage value '{name}'", field=name)
    return parse_usage_profile(
        data["input_tokens_per_request"],
        data["output_tokens_per_request"],
        data["requests_per_day"],
        data.get("period_days", DEFAULT_PERIOD_DAYS),
        limits=limits,
    )


def _coerce_integer(value: Any, field: str) -> int:
    """Convert a raw numeric value to int, rejecting anything non-integral."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ValidationError(f"Invalid input: {field} must be a number", field=field)
    if isinstance(value, int):
        return value
    if isinstance(value, Decimal):
        finite = value.is_finite()
    else:
        finite = math.isfinite(value)
    if not finite:
        raise ValidationError(f"Invalid input: {field} must be finite", field=field)
    if value != int(value):
        raise ValidationError(f"Invalid input: {field} must be a whole number", field=field)
    return int(value)


def _check_count(value: Any, field: str, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Invalid input: {field} must be an integer", field=field)
    if value < minimum:
        qualifier = "positive" if minimum > 0 else "non-negative"
        raise ValidationError(
            f"Invalid input: {field} must be a {qualifier} number", field=field
        )
