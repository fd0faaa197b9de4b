"""
Savings, annualization and breakeven formulas.

Guarded conditions (division by zero, zero-cost comparisons, savings that
never cover hardware) resolve to 0 or NEVER by contract. Non-finite values
never come out of these functions.
"""

import logging
import math
from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal
from typing import Any, List, Optional, Sequence, Union

from .errors import ValidationError
from .pricing import CostResult

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365
DAYS_PER_MONTH = 30
REQUESTS_PER_1K = 1000

DEFAULT_MONTHLY_OPERATING_COST = 200
BREAKEVEN_MAX_MONTHS = 10_000
BREAKEVEN_THRESHOLD_MONTHS = 24

NEVER = "never"

Number = Union[int, float, Decimal]


@dataclass(frozen=True)
class SavingsResult:
    """Savings from picking the cheaper of two models."""
    absolute_savings: Decimal
    percent_savings: Decimal
    cheaper_model_name: str


@dataclass(frozen=True)
class BreakevenResult:
    """Payback estimate for buying hardware instead of paying an API.

    ``breakeven_months`` is a positive month count or NEVER, except when the
    hardware costs nothing: that pays back immediately and reports 0.
    """
    breakeven_months: Union[int, str]  # months >= 0, or NEVER
    monthly_savings: Decimal
    worth_it: bool

    @property
    def pays_back(self) -> bool:
        return self.breakeven_months != NEVER


@dataclass(frozen=True)
class ComparisonSummary:
    """Headline figures for a ranked comparison."""
    cheapest: CostResult
    most_expensive: CostResult
    model_count: int
    savings: SavingsResult
    annual_cost: Decimal


def calculate_savings(a: CostResult, b: CostResult) -> SavingsResult:
    """Compare two cost results.

    Percent savings is relative to the more expensive of the two and is
    rounded to 2 decimal places; it is 0 when both costs are zero.

    Raises:
        ValidationError: If either result lacks a numeric total_cost
    """
    cost_a = _require_number(getattr(a, "total_cost", None), "total_cost")
    cost_b = _require_number(getattr(b, "total_cost", None), "total_cost")

    absolute_savings = abs(cost_a - cost_b)
    max_cost = max(cost_a, cost_b)
    if max_cost > 0:
        percent_savings = (absolute_savings / max_cost * 100).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )
    else:
        percent_savings = Decimal("0")

    cheaper = a if cost_a < cost_b else b
    return SavingsResult(
        absolute_savings=absolute_savings,
        percent_savings=percent_savings,
        cheaper_model_name=cheaper.model_display_name,
    )


def calculate_annual_cost(cost_for_period: Number, period_days: Number) -> Decimal:
    """Annualize a cost observed over ``period_days`` days.

    Uses the actual period length, so a 7-day or 90-day horizon is scaled
    correctly rather than assuming a 30-day month.

    Raises:
        ValidationError: If either argument is not a finite number
    """
    cost = _require_number(cost_for_period, "cost_for_period")
    days = _require_number(period_days, "period_days")
    if days <= 0:
        return Decimal("0")
    return cost / days * DAYS_PER_YEAR


def calculate_monthly_cost(cost_for_period: Number, period_days: Number) -> Decimal:
    """Normalize a period cost to a 30-day month (input for breakeven)."""
    cost = _require_number(cost_for_period, "cost_for_period")
    days = _require_number(period_days, "period_days")
    if days <= 0:
        return Decimal("0")
    return cost / days * DAYS_PER_MONTH


def calculate_cost_per_1k(cost_per_request: Any) -> Decimal:
    """Cost of 1,000 requests; invalid input yields 0 with a warning."""
    try:
        cost = _require_number(cost_per_request, "cost_per_request")
    except ValidationError:
        logger.warning(
            "Invalid input: cost_per_request must be a valid number, got %r", cost_per_request
        )
        return Decimal("0")
    return cost * REQUESTS_PER_1K


def estimate_breakeven(
    api_monthly_cost: Number,
    hardware_cost: Number,
    monthly_operating_cost: Number = DEFAULT_MONTHLY_OPERATING_COST,
    *,
    max_months: int = BREAKEVEN_MAX_MONTHS,
    payback_threshold_months: int = BREAKEVEN_THRESHOLD_MONTHS,
) -> BreakevenResult:
    """Estimate when self-hosting hardware pays for itself.

    Monthly savings are the API bill minus local operating cost (power,
    maintenance). Payback beyond ``max_months`` is reported as NEVER.

    Args:
        api_monthly_cost: Monthly spend on the hosted API
        hardware_cost: One-time hardware purchase
        monthly_operating_cost: Electricity and maintenance per month
        max_months: Sanity cap on the reported payback period
        payback_threshold_months: Longest payback still considered worth it

    Returns:
        BreakevenResult

    Raises:
        ValidationError: If any cost is non-numeric or negative
    """
    api_cost = _require_number(api_monthly_cost, "api_monthly_cost")
    hardware = _require_number(hardware_cost, "hardware_cost")
    operating = _require_number(monthly_operating_cost, "monthly_operating_cost")
    if api_cost < 0 or hardware < 0 or operating < 0:
        raise ValidationError("Invalid input: costs cannot be negative")

    monthly_savings = api_cost - operating

    breakeven_months: Union[int, str]
    if monthly_savings <= 0:
        breakeven_months = NEVER
    else:
        months = int((hardware / monthly_savings).to_integral_value(rounding=ROUND_CEILING))
        breakeven_months = NEVER if months > max_months else months

    worth_it = breakeven_months != NEVER and breakeven_months <= payback_threshold_months
    return BreakevenResult(
        breakeven_months=breakeven_months,
        monthly_savings=monthly_savings,
        worth_it=worth_it,
    )


def summarize_comparison(
    results: Sequence[CostResult],
    period_days: Number,
) -> Optional[ComparisonSummary]:
    """Summarize a ranked comparison, or None when nothing was priced."""
    if not results:
        return None
    ranked: List[CostResult] = list(results)
    cheapest = ranked[0]
    most_expensive = ranked[-1]
    return ComparisonSummary(
        cheapest=cheapest,
        most_expensive=most_expensive,
        model_count=len(ranked),
        savings=calculate_savings(cheapest, most_expensive),
        annual_cost=calculate_annual_cost(cheapest.total_cost, period_days),
    )


def _require_number(value: Any, field: str) -> Decimal:
    """Convert a finite int/float/Decimal to Decimal or raise ValidationError."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ValidationError(f"Invalid input: {field} must be a number", field=field)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValidationError(f"Invalid input: {field} must be finite", field=field)
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValidationError(f"Invalid input: {field} must be finite", field=field)
        return Decimal(str(value))
    return Decimal(value)
