"""
Tests for refinance calculations.
"""

import math

import pytest

from deal_analyzer.calculations.refinance import (
    RefinanceParams,
    calculate_refinance,
    calculate_minimum_arv,
    calculate_max_purchase_price,
)


def make_params(**overrides):
    params = dict(
        after_repair_value=160000,
        total_investment=133000,
        refinance_ltv=0.75,
        refinance_rate=0.05,
        refinance_term_years=30,
        refinance_closing_costs=3500,
    )
    params.update(overrides)
    return RefinanceParams(**params)


class TestCalculateRefinance:
    """Test cash-out refinance outcome."""

    def test_partial_recoup(self):
        """75% of 160k less 3.5k closing leaves 16.5k of 133k in the deal."""
        outcome = calculate_refinance(make_params())
        assert outcome.new_loan_amount == 120000
        assert outcome.cash_recouped == 116500
        assert outcome.remaining_investment == 16500
        assert outcome.is_brrrr_successful is False

    def test_new_payment_from_mortgage_formula(self):
        """Payment on 120k at 5% for 30 years."""
        outcome = calculate_refinance(make_params())
        assert outcome.new_monthly_payment == 644.19

    def test_full_recoup(self):
        """All capital out: remaining investment is zero, never negative."""
        outcome = calculate_refinance(make_params(total_investment=100000, refinance_closing_costs=0))
        assert outcome.remaining_investment == 0
        assert outcome.is_brrrr_successful is True

    def test_exact_recoup_is_successful(self):
        """Recouping exactly the investment counts as success."""
        outcome = calculate_refinance(make_params(total_investment=116500))
        assert outcome.remaining_investment == 0
        assert outcome.is_brrrr_successful is True

    def test_loan_amount_floored(self):
        """Loan amount is rounded down to whole dollars."""
        outcome = calculate_refinance(make_params(after_repair_value=100001))
        assert outcome.new_loan_amount == 75000

    def test_negative_cash_recouped_not_clamped(self):
        """Closing costs larger than the loan give negative proceeds."""
        outcome = calculate_refinance(make_params(after_repair_value=1000, refinance_closing_costs=1000))
        assert outcome.cash_recouped == -250
        assert outcome.remaining_investment == 133250

    def test_zero_term_propagates_non_finite(self):
        """A zero term is not validated; the payment comes out non-finite."""
        outcome = calculate_refinance(make_params(refinance_term_years=0))
        assert not math.isfinite(outcome.new_monthly_payment)


class TestPlanningHelpers:
    """Test minimum ARV and maximum purchase price."""

    def test_minimum_arv(self):
        """(133k + 3.5k) / 0.75."""
        assert calculate_minimum_arv(133000, 0.75, 3500) == 182000

    def test_minimum_arv_rounds_up(self):
        """Fractional ARVs round up."""
        assert calculate_minimum_arv(100000, 0.7, 0) == 142858

    def test_minimum_arv_round_trip(self):
        """Refinancing at the minimum ARV recoups everything."""
        arv = calculate_minimum_arv(133000, 0.75, 3500)
        outcome = calculate_refinance(make_params(after_repair_value=arv))
        assert outcome.is_brrrr_successful is True

    def test_max_purchase_price(self):
        """160k * 0.75 - 3.5k closing - 30k rehab."""
        assert calculate_max_purchase_price(160000, 30000, 0.75, 3500) == 86500

    def test_max_purchase_price_with_buffer(self):
        """Cash buffer comes off the offer."""
        assert calculate_max_purchase_price(160000, 30000, 0.75, 3500, 5000) == 81500

    def test_max_purchase_price_never_negative(self):
        """Rehab larger than the loan gives zero."""
        assert calculate_max_purchase_price(50000, 60000, 0.75, 3500) == 0

    @pytest.mark.parametrize("ltv", [0.7, 0.75, 0.8])
    def test_max_purchase_price_recoups_capital(self, ltv):
        """Buying at the max price leaves nothing in the deal."""
        price = calculate_max_purchase_price(200000, 25000, ltv, 4000)
        outcome = calculate_refinance(
            make_params(
                after_repair_value=200000,
                total_investment=price + 25000,
                refinance_ltv=ltv,
                refinance_closing_costs=4000,
            )
        )
        assert outcome.remaining_investment == 0
