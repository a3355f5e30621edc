"""
Tests for IRR/NPV calculations and numeric helpers.
"""

import math

import pytest

from deal_analyzer.calculations.irr import (
    calculate_npv,
    calculate_simple_irr,
    monthly_to_annual_irr,
)
from deal_analyzer.calculations.numeric import (
    safe_divide,
    safe_power,
    round_half_up,
    floor,
    ceil,
    non_negative,
)


class TestNPV:
    """Test NPV calculation."""

    def test_zero_rate_is_sum(self):
        """At 0% NPV is the plain sum."""
        assert calculate_npv([-100, 50, 60], 0) == pytest.approx(10)

    def test_discounting(self):
        """Each period is discounted once more."""
        npv = calculate_npv([-100, 110], 0.10)
        assert npv == pytest.approx(0)

    def test_positive_npv(self):
        """Returns above cost give positive NPV."""
        assert calculate_npv([-100, 50, 50, 50], 0.10) > 0


class TestSimpleIRR:
    """Test directional IRR search."""

    def test_converges_at_starting_guess(self):
        """10% return over one period is found immediately."""
        assert calculate_simple_irr([-100, 110]) == pytest.approx(0.10)

    def test_converges_near_guess(self):
        """Rates within reach of the starting guess are found."""
        rate = calculate_simple_irr([-1000, 1105])
        assert rate is not None
        assert calculate_npv([-1000, 1105], rate) == pytest.approx(0, abs=0.1)

    def test_no_result_out_of_reach(self):
        """A 0% IRR is outside the search range and reports no result."""
        assert calculate_simple_irr([-100000, 0, 0, 100000]) is None

    def test_no_result_is_distinct_from_zero(self):
        """Non-convergence is None, never 0."""
        result = calculate_simple_irr([-100, 105])
        assert result is None
        assert result != 0

    def test_iteration_budget(self):
        """With no iterations there is nothing to converge on."""
        assert calculate_simple_irr([-100, 110], max_iterations=0) is None

    def test_custom_guess(self):
        """Search starts from the supplied guess."""
        assert calculate_simple_irr([-100, 105], guess=0.05) == pytest.approx(0.05)

    def test_monthly_to_annual(self):
        """1% a month compounds to about 12.68% a year."""
        assert monthly_to_annual_irr(0.01) == pytest.approx(0.126825, abs=1e-6)


class TestNumericHelpers:
    """Test IEEE-style arithmetic helpers."""

    def test_safe_divide_by_zero(self):
        """Zero denominators give inf or nan instead of raising."""
        assert safe_divide(1, 0) == math.inf
        assert safe_divide(-1, 0) == -math.inf
        assert math.isnan(safe_divide(0, 0))

    def test_safe_divide_normal(self):
        assert safe_divide(10, 4) == 2.5

    def test_safe_power_negative_base(self):
        """Fractional power of a negative base is nan."""
        assert math.isnan(safe_power(-0.5, 0.5))
        assert safe_power(2, 3) == 8

    def test_round_half_up(self):
        """Halves round toward positive infinity."""
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(-2.5) == -2
        assert round_half_up(1060.9) == 1061

    def test_floor_ceil_pass_through_non_finite(self):
        assert floor(math.inf) == math.inf
        assert math.isnan(ceil(math.nan))
        assert floor(1.9) == 1
        assert ceil(1.1) == 2

    def test_non_negative(self):
        """Clamps at zero but keeps nan."""
        assert non_negative(-5) == 0
        assert non_negative(5) == 5
        assert math.isnan(non_negative(math.nan))
