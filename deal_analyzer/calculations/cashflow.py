"""
Cash Flow Calculations

Monthly income/expense records shared by the projection engine, plus
quick cash-flow checks used when screening a deal.
"""

from dataclasses import dataclass, fields


@dataclass
class MonthlyIncome:
    """Monthly income sources for a property."""

    rent: float = 0.0
    other_income: float = 0.0

    @property
    def total(self) -> float:
        return self.rent + self.other_income


@dataclass
class MonthlyExpenses:
    """Monthly expense lines for a property."""

    mortgage: float = 0.0
    taxes: float = 0.0
    insurance: float = 0.0
    maintenance: float = 0.0
    property_management: float = 0.0
    utilities: float = 0.0
    vacancy_allowance: float = 0.0
    other_expenses: float = 0.0
    capital_reserves: float = 0.0  # Monthly contributions to capital expense reserves

    @property
    def total(self) -> float:
        return sum(getattr(self, name) for name in expense_fields())


def expense_fields() -> tuple:
    """Names of every MonthlyExpenses line, in declaration order."""
    return tuple(f.name for f in fields(MonthlyExpenses))


def calculate_monthly_cash_flow(income: MonthlyIncome, expenses: MonthlyExpenses) -> float:
    """Net monthly cash flow (income minus all expenses), rounded to cents."""
    return round(income.total - expenses.total, 2)


def calculate_cash_on_cash_return(annual_cash_flow: float, total_investment: float) -> float:
    """
    Calculate cash-on-cash return.

    Args:
        annual_cash_flow: Annual cash flow (monthly * 12)
        total_investment: Total cash invested

    Returns:
        Cash-on-cash return as decimal, 4 places

    Raises:
        ValueError: If total investment is not positive
    """
    if total_investment <= 0:
        raise ValueError("Total investment must be greater than zero")

    return round(annual_cash_flow / total_investment, 4)


def calculate_expense_ratio(total_expenses: float, total_income: float) -> float:
    """Expense ratio (expenses / income) as decimal, 4 places."""
    if total_income <= 0:
        raise ValueError("Total income must be greater than zero")

    return round(total_expenses / total_income, 4)


def meets_one_percent_rule(monthly_rent: float, purchase_price: float) -> bool:
    """Check the 1% rule: monthly rent at least 1% of the purchase price."""
    return monthly_rent >= purchase_price * 0.01


def estimate_cash_flow_with_50_percent_rule(
    monthly_rent: float, mortgage_payment: float
) -> float:
    """
    Estimate cash flow assuming operating expenses are half of rent.

    Args:
        monthly_rent: Monthly rental income
        mortgage_payment: Monthly debt service

    Returns:
        Estimated monthly cash flow, rounded to cents
    """
    estimated_expenses = monthly_rent * 0.5
    return round(monthly_rent - estimated_expenses - mortgage_payment, 2)


def calculate_capital_reserve_budget(replacement_cost: float, lifespan_years: float) -> float:
    """Monthly amount to set aside so a component is funded by end of life."""
    if lifespan_years <= 0:
        return 0.0
    return replacement_cost / (lifespan_years * 12)
