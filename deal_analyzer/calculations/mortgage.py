"""
Mortgage Calculations

Fixed-rate monthly payment and full amortization schedule for a loan.
"""

from typing import List, Dict

from deal_analyzer.calculations.numeric import safe_divide, safe_power


def calculate_monthly_payment(
    principal: float, annual_rate: float, term_years: float
) -> float:
    """
    Calculate the fixed monthly payment of an amortizing loan.

    Standard formula: P * r * (1 + r)^n / ((1 + r)^n - 1)

    Args:
        principal: Loan amount
        annual_rate: Annual interest rate as decimal (e.g., 0.05 for 5%)
        term_years: Loan term in years

    Returns:
        Monthly payment rounded to cents. A 0% loan is paid straight-line
        (principal / number of payments) and is not rounded.
    """
    monthly_rate = annual_rate / 12
    number_of_payments = term_years * 12

    if annual_rate == 0:
        return safe_divide(principal, number_of_payments)

    growth = safe_power(1 + monthly_rate, number_of_payments)
    payment = safe_divide(principal * monthly_rate * growth, growth - 1)

    return round(payment, 2)


def calculate_amortization_schedule(
    principal: float, annual_rate: float, term_years: float
) -> List[Dict]:
    """
    Generate the month-by-month amortization schedule.

    Each row splits the fixed payment into interest (balance * monthly rate)
    and principal. The fixed payment is rounded to cents, so the balance
    left after the last row is close to, but rarely exactly, zero.

    Args:
        principal: Loan amount
        annual_rate: Annual interest rate as decimal
        term_years: Loan term in years

    Returns:
        List of rows with month, payment, principal, interest and
        remaining_balance (never negative)
    """
    payment = calculate_monthly_payment(principal, annual_rate, term_years)
    monthly_rate = annual_rate / 12
    number_of_payments = int(term_years * 12)

    schedule = []
    balance = principal

    for month in range(1, number_of_payments + 1):
        interest = balance * monthly_rate
        principal_pmt = payment - interest
        balance -= principal_pmt

        schedule.append(
            {
                "month": month,
                "payment": round(payment, 2),
                "principal": round(principal_pmt, 2),
                "interest": round(interest, 2),
                "remaining_balance": round(balance, 2) if balance > 0 else 0.0,
            }
        )

    return schedule


def calculate_total_interest(schedule: List[Dict]) -> float:
    """Calculate total interest paid over the schedule."""
    return sum(row["interest"] for row in schedule)


def calculate_total_paid(schedule: List[Dict]) -> float:
    """Calculate total of all payments over the schedule."""
    return sum(row["payment"] for row in schedule)
