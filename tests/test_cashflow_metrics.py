"""
Tests for cash flow helpers and investment metrics.
"""

import pytest

from deal_analyzer.calculations.cashflow import (
    MonthlyIncome,
    MonthlyExpenses,
    expense_fields,
    calculate_monthly_cash_flow,
    calculate_cash_on_cash_return,
    calculate_expense_ratio,
    meets_one_percent_rule,
    estimate_cash_flow_with_50_percent_rule,
    calculate_capital_reserve_budget,
)
from deal_analyzer.calculations.metrics import (
    calculate_roi,
    calculate_annualized_roi,
    calculate_cap_rate,
    calculate_grm,
    calculate_equity_multiple,
)


class TestCashFlow:
    """Test monthly cash flow records and helpers."""

    def test_totals(self):
        income = MonthlyIncome(rent=1500, other_income=50)
        expenses = MonthlyExpenses(mortgage=600, taxes=200, insurance=100, capital_reserves=50)
        assert income.total == 1550
        assert expenses.total == 950

    def test_expense_fields_cover_every_line(self):
        assert expense_fields() == (
            "mortgage",
            "taxes",
            "insurance",
            "maintenance",
            "property_management",
            "utilities",
            "vacancy_allowance",
            "other_expenses",
            "capital_reserves",
        )

    def test_monthly_cash_flow(self):
        income = MonthlyIncome(rent=1200)
        expenses = MonthlyExpenses(mortgage=536.82, taxes=100.005)
        assert calculate_monthly_cash_flow(income, expenses) == pytest.approx(563.18, abs=0.01)

    def test_cash_on_cash(self):
        """6k a year on 50k invested."""
        assert calculate_cash_on_cash_return(6000, 50000) == 0.12

    def test_cash_on_cash_requires_investment(self):
        with pytest.raises(ValueError):
            calculate_cash_on_cash_return(6000, 0)

    def test_expense_ratio(self):
        assert calculate_expense_ratio(450, 1000) == 0.45
        with pytest.raises(ValueError):
            calculate_expense_ratio(450, 0)

    def test_one_percent_rule(self):
        assert meets_one_percent_rule(1000, 100000) is True
        assert meets_one_percent_rule(999, 100000) is False

    def test_fifty_percent_rule(self):
        """Half of rent goes to operating expenses."""
        assert estimate_cash_flow_with_50_percent_rule(2000, 600) == 400

    def test_capital_reserve_budget(self):
        """Replacement cost spread evenly over the lifespan."""
        assert calculate_capital_reserve_budget(12000, 20) == 50
        assert calculate_capital_reserve_budget(12000, 0) == 0


class TestMetrics:
    """Test return and valuation ratios."""

    def test_roi(self):
        assert calculate_roi(10000, 50000) == 0.2

    def test_annualized_roi(self):
        """21% over two years is 10% a year."""
        assert calculate_annualized_roi(10500, 50000, 2) == pytest.approx(0.1)

    def test_annualized_roi_requires_years(self):
        with pytest.raises(ValueError):
            calculate_annualized_roi(10500, 50000, 0)

    def test_cap_rate(self):
        """12k NOI on a 150k property."""
        assert calculate_cap_rate(12000, 150000) == 0.08

    def test_grm(self):
        assert calculate_grm(150000, 18000) == 8.33

    def test_equity_multiple(self):
        assert calculate_equity_multiple(100000, 50000) == 2.0

    @pytest.mark.parametrize(
        "func,args",
        [
            (calculate_roi, (100, 0)),
            (calculate_cap_rate, (100, 0)),
            (calculate_grm, (100000, 0)),
            (calculate_equity_multiple, (100, 0)),
        ],
    )
    def test_non_positive_denominator(self, func, args):
        with pytest.raises(ValueError):
            func(*args)
