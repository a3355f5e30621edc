"""
Investment Metrics

Return and valuation ratios for screening and comparing deals.
"""


def calculate_roi(net_profit: float, total_investment: float) -> float:
    """
    Calculate ROI (Return on Investment).

    Args:
        net_profit: Total profit (annual or lifetime)
        total_investment: Total amount invested

    Returns:
        ROI as decimal, 4 places (e.g., 0.15 for 15%)

    Raises:
        ValueError: If total investment is not positive
    """
    if total_investment <= 0:
        raise ValueError("Total investment must be greater than zero")

    return round(net_profit / total_investment, 4)


def calculate_annualized_roi(net_profit: float, total_investment: float, years: float) -> float:
    """
    Calculate annualized ROI for a multi-year hold: (1 + ROI)^(1/years) - 1.

    Raises:
        ValueError: If total investment or years is not positive
    """
    if total_investment <= 0:
        raise ValueError("Total investment must be greater than zero")
    if years <= 0:
        raise ValueError("Years must be greater than zero")

    total_roi = calculate_roi(net_profit, total_investment)
    return round((1 + total_roi) ** (1 / years) - 1, 4)


def calculate_cap_rate(net_operating_income: float, property_value: float) -> float:
    """Cap rate = annual NOI (before debt service) / property value, 4 places."""
    if property_value <= 0:
        raise ValueError("Property value must be greater than zero")

    return round(net_operating_income / property_value, 4)


def calculate_grm(property_value: float, annual_gross_rent: float) -> float:
    """Gross Rent Multiplier = property value / annual gross rent, 2 places."""
    if annual_gross_rent <= 0:
        raise ValueError("Annual gross rent must be greater than zero")

    return round(property_value / annual_gross_rent, 2)


def calculate_equity_multiple(total_cash_returned: float, total_cash_invested: float) -> float:
    """Equity multiple = total cash out / total cash in (e.g., 2.0 = 2.0x)."""
    if total_cash_invested <= 0:
        raise ValueError("No investment found")

    return total_cash_returned / total_cash_invested
