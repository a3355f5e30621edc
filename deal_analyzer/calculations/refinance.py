"""
Refinance Calculations

Cash-out refinance outcome for a BRRRR deal, plus planning helpers that
work backwards from the refinance to a minimum ARV or a maximum offer.
"""

from dataclasses import dataclass

from deal_analyzer.calculations.mortgage import calculate_monthly_payment
from deal_analyzer.calculations.numeric import safe_divide, floor, ceil, non_negative


@dataclass
class RefinanceParams:
    """Inputs for a cash-out refinance."""

    after_repair_value: float
    total_investment: float  # Capital to recoup (purchase + rehab, or what is still stranded)
    refinance_ltv: float  # e.g., 0.75 for 75% LTV
    refinance_rate: float  # Annual rate as decimal
    refinance_term_years: float
    refinance_closing_costs: float


@dataclass
class RefinanceOutcome:
    """Result of a cash-out refinance."""

    new_loan_amount: float
    new_monthly_payment: float
    cash_recouped: float  # Loan minus closing costs, may be negative
    remaining_investment: float  # Never negative
    is_brrrr_successful: bool  # All invested capital recouped


def calculate_refinance(params: RefinanceParams) -> RefinanceOutcome:
    """
    Calculate the outcome of a cash-out refinance.

    Inputs are not validated: an LTV outside (0, 1] or a non-positive ARV
    simply produces a meaningless outcome.

    Args:
        params: Refinance parameters

    Returns:
        RefinanceOutcome with the new loan, its payment and the capital recouped
    """
    new_loan_amount = floor(params.after_repair_value * params.refinance_ltv)

    new_monthly_payment = calculate_monthly_payment(
        new_loan_amount, params.refinance_rate, params.refinance_term_years
    )

    cash_recouped = new_loan_amount - params.refinance_closing_costs
    remaining_investment = non_negative(params.total_investment - cash_recouped)

    return RefinanceOutcome(
        new_loan_amount=new_loan_amount,
        new_monthly_payment=new_monthly_payment,
        cash_recouped=cash_recouped,
        remaining_investment=remaining_investment,
        is_brrrr_successful=cash_recouped >= params.total_investment,
    )


def calculate_minimum_arv(
    total_investment: float, refinance_ltv: float, refinance_closing_costs: float
) -> float:
    """
    Calculate the lowest ARV at which a refinance recoups all capital.

    ARV * LTV - closing costs >= total investment, so
    ARV >= (total investment + closing costs) / LTV, rounded up.
    """
    return ceil(safe_divide(total_investment + refinance_closing_costs, refinance_ltv))


def calculate_max_purchase_price(
    after_repair_value: float,
    rehab_costs: float,
    refinance_ltv: float,
    refinance_closing_costs: float,
    desired_cash_buffer: float = 0,
) -> float:
    """
    Calculate the highest purchase price that still recoups all capital.

    Args:
        after_repair_value: Expected ARV
        rehab_costs: Expected rehab costs
        refinance_ltv: Loan-to-value ratio for the refinance
        refinance_closing_costs: Closing costs for the refinance
        desired_cash_buffer: Cash to leave on the table as a cushion

    Returns:
        Maximum purchase price, rounded down and never negative
    """
    max_cash_out = after_repair_value * refinance_ltv - refinance_closing_costs
    max_investment = max_cash_out - desired_cash_buffer
    max_purchase = max_investment - rehab_costs

    return floor(non_negative(max_purchase))
