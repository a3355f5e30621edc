"""
IRR and NPV Calculations

IRR is estimated with a damped directional search: starting at 10%, the
guess moves toward the side where NPV crosses zero by a step that halves
every iteration. The search can only travel a bounded distance from the
starting guess, so it reports "no result" (None) when NPV never gets
within tolerance, which callers must keep distinct from a genuine 0% IRR.
"""

from typing import List, Optional

from deal_analyzer.calculations.numeric import safe_divide, safe_power

MAX_ITERATIONS = 100
NPV_TOLERANCE = 0.1
DEFAULT_GUESS = 0.1
INITIAL_STEP = 0.01


def calculate_npv(cash_flows: List[float], discount_rate: float) -> float:
    """
    Calculate NPV (Net Present Value) of periodic cash flows.

    Args:
        cash_flows: Array of cash flows (negative = outflow, positive = inflow),
            the first one undiscounted
        discount_rate: Discount rate per period (e.g., 0.01 for 1% a month)

    Returns:
        NPV value
    """
    npv = 0.0
    for period, cf in enumerate(cash_flows):
        npv += safe_divide(cf, safe_power(1 + discount_rate, period))
    return npv


def calculate_simple_irr(
    cash_flows: List[float],
    max_iterations: int = MAX_ITERATIONS,
    guess: float = DEFAULT_GUESS,
) -> Optional[float]:
    """
    Estimate IRR (Internal Rate of Return) per period by directional search.

    Args:
        cash_flows: Array of periodic cash flows, investment first
        max_iterations: Search budget
        guess: Starting rate

    Returns:
        Rate at which |NPV| < 0.1, or None if the search did not converge
    """
    step = INITIAL_STEP

    for _ in range(max_iterations):
        npv = calculate_npv(cash_flows, guess)

        if abs(npv) < NPV_TOLERANCE:
            return guess

        if npv > 0:
            guess += step
        else:
            guess -= step

        step = step / 2

    return None


def monthly_to_annual_irr(monthly_irr: float) -> float:
    """Convert monthly IRR to annual IRR."""
    return ((1 + monthly_irr) ** 12) - 1
