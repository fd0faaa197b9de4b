"""
Unit tests for usage profile parsing and limits.
"""

from decimal import Decimal

import pytest

from llm_cost_compare.core.errors import ValidationError
from llm_cost_compare.core.usage import (
    UsageLimits,
    UsageProfile,
    parse_usage_profile,
    usage_from_mapping,
)


class TestParseUsageProfile:
    """Test the validation boundary for raw usage values."""

    def test_valid_profile(self):
        profile = parse_usage_profile(500, 200, 1000, 7)
        assert profile == UsageProfile(500, 200, 1000, 7)
        assert profile.total_requests == 7000
        assert profile.total_input_tokens == 3_500_000
        assert profile.total_output_tokens == 1_400_000

    def test_default_period_is_30_days(self):
        assert parse_usage_profile(1, 1, 1).period_days == 30

    def test_integral_floats_normalised(self):
        profile = parse_usage_profile(500.0, Decimal("200"), 1000, 30.0)
        assert profile.input_tokens_per_request == 500
        assert isinstance(profile.input_tokens_per_request, int)
        assert isinstance(profile.output_tokens_per_request, int)

    def test_zero_values_allowed(self):
        profile = parse_usage_profile(0, 0, 0, 1)
        assert profile.total_requests == 0

    @pytest.mark.parametrize("bad", [-1, 1.5, float("nan"), float("inf"), "500", None, True])
    def test_invalid_input_tokens(self, bad):
        with pytest.raises(ValidationError) as exc_info:
            parse_usage_profile(bad, 1, 1, 1)
        assert exc_info.value.field == "input_tokens_per_request"

    @pytest.mark.parametrize("bad", [0, -5])
    def test_period_days_must_be_positive(self, bad):
        with pytest.raises(ValidationError, match="period_days must be a positive number"):
            parse_usage_profile(1, 1, 1, bad)

    def test_decimal_nan_rejected(self):
        with pytest.raises(ValidationError, match="finite"):
            parse_usage_profile(1, Decimal("NaN"), 1, 1)

    def test_type_errors_reported_before_ceilings(self):
        """Verify a bad type wins over an over-ceiling value in an earlier field."""
        with pytest.raises(ValidationError) as exc_info:
            parse_usage_profile(20_000_000, 1, 1, "thirty")
        assert exc_info.value.field == "period_days"

    @pytest.mark.parametrize("args, field", [
        ((10_000_001, 1, 1, 1), "input_tokens_per_request"),
        ((1, 10_000_001, 1, 1), "output_tokens_per_request"),
        ((1, 1, 100_000_001, 1), "requests_per_day"),
        ((1, 1, 1, 3651), "period_days"),
    ])
    def test_default_ceilings(self, args, field):
        with pytest.raises(ValidationError) as exc_info:
            parse_usage_profile(*args)
        assert exc_info.value.field == field

    def test_values_at_ceiling_allowed(self):
        profile = parse_usage_profile(10_000_000, 10_000_000, 100_000_000, 3650)
        assert profile.period_days == 3650

    def test_custom_limits(self):
        limits = UsageLimits(max_period_days=365)
        with pytest.raises(ValidationError, match="Days exceed maximum of 365"):
            parse_usage_profile(1, 1, 1, 366, limits=limits)

    def test_profile_is_immutable(self):
        profile = parse_usage_profile(1, 1, 1, 1)
        with pytest.raises(AttributeError):
            profile.requests_per_day = 5


class TestUsageFromMapping:
    """Test parsing usage from a plain mapping."""

    def test_valid_mapping(self):
        profile = usage_from_mapping({
            "input_tokens_per_request": 300,
            "output_tokens_per_request": 100,
            "requests_per_day": 5000,
            "period_days": 90,
        })
        assert profile.total_requests == 450_000

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError, match="Unknown usage keys"):
            usage_from_mapping({
                "input_tokens_per_request": 1,
                "output_tokens_per_request": 1,
                "requests_per_day": 1,
                "days": 30,
            })

    def test_missing_key_rejected(self):
        with pytest.raises(ValidationError, match="requests_per_day"):
            usage_from_mapping({
                "input_tokens_per_request": 1,
                "output_tokens_per_request": 1,
            })


class TestUsageLimits:
    """Test limit configuration validation."""

    def test_defaults(self):
        limits = UsageLimits()
        assert limits.max_input_tokens == 10_000_000
        assert limits.max_output_tokens == 10_000_000
        assert limits.max_requests_per_day == 100_000_000
        assert limits.max_period_days == 3650

    @pytest.mark.parametrize("bad", [0, -1, 1.5, True])
    def test_invalid_ceiling(self, bad):
        with pytest.raises(ValidationError):
            UsageLimits(max_input_tokens=bad)
