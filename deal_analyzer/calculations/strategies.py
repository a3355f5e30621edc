"""
Strategy Calculations

Income and expense estimates for the short-term rental, multifamily and
house-hack strategies. Percent fields are plain numbers (95 means 95%).
"""

from dataclasses import dataclass, field, replace
from typing import List, Dict, Optional

from deal_analyzer.calculations.projection import PropertyOperation

NIGHTS_PER_MONTH = 30
AVERAGE_STAY_NIGHTS = 3
SELLING_COST_RATE = 0.06
DEFAULT_OWNER_UNIT_OCCUPANCY = 95


# =============================================================================
# SHORT-TERM RENTAL
# =============================================================================


@dataclass
class ShortTermRentalIncome:
    """Seasonal nightly rates and occupancy for a short-term rental."""

    peak_season_daily: float = 150.0
    peak_season_occupancy: float = 90.0
    peak_season_months: List[int] = field(default_factory=lambda: [6, 7, 8])
    mid_season_daily: float = 100.0
    mid_season_occupancy: float = 70.0
    mid_season_months: List[int] = field(default_factory=lambda: [4, 5, 9, 10])
    low_season_daily: float = 80.0
    low_season_occupancy: float = 50.0
    low_season_months: List[int] = field(default_factory=lambda: [1, 2, 3, 11, 12])
    cleaning_fee: float = 75.0  # Per booked night
    other_fees: float = 25.0  # Per booked night
    platform_fee: float = 3.0  # Percent of gross booking revenue


@dataclass
class ShortTermRentalExpenses:
    """Operating costs of a short-term rental."""

    property_management_fee: float = 20.0  # Percent of revenue
    cleaning_costs: float = 85.0  # Per turnover
    supplies_per_month: float = 50.0
    utility_expenses: float = 200.0  # Monthly
    property_taxes: float = 2400.0  # Annual
    insurance: float = 1800.0  # Annual
    furniture_replacement_percent: float = 5.0  # Percent of revenue
    maintenance_percent: float = 3.0  # Percent of revenue
    advertising_per_month: float = 50.0
    subscription_services: float = 30.0  # Monthly
    other_expenses: float = 0.0  # Monthly


def _season_nights(months: List[int], occupancy: float) -> float:
    return len(months) * NIGHTS_PER_MONTH * (occupancy / 100)


def calculate_str_revenue(income: ShortTermRentalIncome) -> Dict:
    """
    Calculate annual short-term rental revenue.

    Every season month counts as 30 nights; booked nights are scaled by
    the season's occupancy. Cleaning and other fees are charged per booked
    night, and the platform fee comes off the gross.

    Returns:
        Dict with per-season revenue, fee revenue, platform fee, total
        annual revenue, average monthly revenue and total booked nights
    """
    peak_nights = _season_nights(income.peak_season_months, income.peak_season_occupancy)
    mid_nights = _season_nights(income.mid_season_months, income.mid_season_occupancy)
    low_nights = _season_nights(income.low_season_months, income.low_season_occupancy)
    total_nights = peak_nights + mid_nights + low_nights

    peak_revenue = peak_nights * income.peak_season_daily
    mid_revenue = mid_nights * income.mid_season_daily
    low_revenue = low_nights * income.low_season_daily

    cleaning_fee_revenue = total_nights * income.cleaning_fee
    other_fees_revenue = total_nights * income.other_fees

    total_before_fee = (
        peak_revenue + mid_revenue + low_revenue + cleaning_fee_revenue + other_fees_revenue
    )
    platform_fee_amount = total_before_fee * (income.platform_fee / 100)
    total_annual_revenue = total_before_fee - platform_fee_amount

    return {
        "peak_revenue": peak_revenue,
        "mid_revenue": mid_revenue,
        "low_revenue": low_revenue,
        "cleaning_fee_revenue": cleaning_fee_revenue,
        "other_fees_revenue": other_fees_revenue,
        "platform_fee_amount": platform_fee_amount,
        "total_annual_revenue": total_annual_revenue,
        "average_monthly_revenue": total_annual_revenue / 12,
        "total_nights": total_nights,
    }


def calculate_str_expenses(
    income: ShortTermRentalIncome, expenses: ShortTermRentalExpenses
) -> Dict:
    """
    Calculate annual short-term rental expenses and the resulting cash flow.

    Turnovers assume an average 3-night stay.
    """
    revenue = calculate_str_revenue(income)
    annual_revenue = revenue["total_annual_revenue"]
    annual_turnover = revenue["total_nights"] / AVERAGE_STAY_NIGHTS

    itemized = {
        "property_management": annual_revenue * (expenses.property_management_fee / 100),
        "cleaning": annual_turnover * expenses.cleaning_costs,
        "supplies": expenses.supplies_per_month * 12,
        "utilities": expenses.utility_expenses * 12,
        "property_taxes": expenses.property_taxes,
        "insurance": expenses.insurance,
        "furniture_replacement": annual_revenue * (expenses.furniture_replacement_percent / 100),
        "maintenance": annual_revenue * (expenses.maintenance_percent / 100),
        "advertising": expenses.advertising_per_month * 12,
        "subscriptions": expenses.subscription_services * 12,
        "other": expenses.other_expenses * 12,
    }

    total_annual_expenses = sum(itemized.values())
    monthly_expenses = total_annual_expenses / 12

    return {
        "annual_expenses": itemized,
        "total_annual_expenses": total_annual_expenses,
        "monthly_expenses": monthly_expenses,
        "monthly_revenue": annual_revenue / 12,
        "monthly_cash_flow": annual_revenue / 12 - monthly_expenses,
    }


# =============================================================================
# MULTIFAMILY
# =============================================================================


@dataclass
class RentalUnit:
    """A single rentable unit."""

    unit_number: str
    monthly_rent: float
    bedrooms: int = 0
    bathrooms: float = 0
    sqft: float = 0
    occupancy_rate: float = 95.0  # Percent


def summarize_units(units: List[RentalUnit]) -> Dict:
    """Rent roll totals and averages; effective gross income is rent scaled by occupancy."""
    if not units:
        return {
            "total_units": 0,
            "total_rent": 0.0,
            "average_rent": 0.0,
            "average_rent_per_sqft": 0.0,
            "total_sqft": 0.0,
            "total_bedrooms": 0,
            "total_bathrooms": 0.0,
            "effective_gross_income": 0.0,
        }

    total_rent = sum(unit.monthly_rent for unit in units)
    total_sqft = sum(unit.sqft for unit in units)

    return {
        "total_units": len(units),
        "total_rent": total_rent,
        "average_rent": total_rent / len(units),
        "average_rent_per_sqft": total_rent / total_sqft if total_sqft > 0 else 0.0,
        "total_sqft": total_sqft,
        "total_bedrooms": sum(unit.bedrooms for unit in units),
        "total_bathrooms": sum(unit.bathrooms for unit in units),
        "effective_gross_income": sum(
            unit.monthly_rent * (unit.occupancy_rate / 100) for unit in units
        ),
    }


def operation_for_units(
    units: List[RentalUnit], base_operation: PropertyOperation
) -> PropertyOperation:
    """Operation inputs whose monthly rent is the whole rent roll, for projecting a multifamily deal."""
    return replace(base_operation, monthly_rent=summarize_units(units)["total_rent"])


# =============================================================================
# HOUSE HACK
# =============================================================================


@dataclass
class OwnerUnit:
    """The unit the owner lives in."""

    unit_number: str = "A"
    bedrooms: int = 2
    bathrooms: float = 1
    sqft: float = 900
    market_rent: float = 1200.0  # What it would rent for
    personal_usage: float = 100.0  # Percent used by the owner
    occupancy_rate: Optional[float] = None  # Percent, used when the owner moves out


@dataclass
class HouseHackConfiguration:
    """Owner-occupied deal with rented units alongside."""

    owner_unit: OwnerUnit = field(default_factory=OwnerUnit)
    current_housing_cost: float = 1500.0  # Current monthly rent or housing payment
    personal_utilities: float = 150.0
    combined_utilities: float = 100.0
    combined_insurance: float = 1200.0  # Annual
    combined_property_tax: float = 2400.0  # Annual
    rental_units: List[RentalUnit] = field(default_factory=list)
    future_property_value_change: float = 3.0  # Percent
    purchase_price: float = 0.0


def calculate_house_hack(config: HouseHackConfiguration) -> Dict:
    """
    Monthly economics of living in one unit and renting the rest.

    Net housing cost = owner's share of their unit's market rent
    + shared expenses - rental income. Negative means the tenants more
    than cover the owner's housing.
    """
    rental_income = sum(
        unit.monthly_rent * (unit.occupancy_rate / 100) for unit in config.rental_units
    )
    owner_unit_personal_cost = config.owner_unit.market_rent * (
        config.owner_unit.personal_usage / 100
    )

    total_utilities = config.personal_utilities + config.combined_utilities
    total_monthly_expenses = (
        config.combined_insurance / 12 + config.combined_property_tax / 12 + total_utilities
    )

    net_housing_cost = owner_unit_personal_cost + total_monthly_expenses - rental_income
    housing_cost_savings = config.current_housing_cost - net_housing_cost

    return {
        "rental_income": rental_income,
        "owner_unit_market_rent": config.owner_unit.market_rent,
        "owner_unit_personal_cost": owner_unit_personal_cost,
        "total_utilities": total_utilities,
        "total_monthly_expenses": total_monthly_expenses,
        "net_housing_cost": net_housing_cost,
        "housing_cost_savings": housing_cost_savings,
        "is_cash_flow_positive": net_housing_cost < 0,
        "percent_savings": (
            housing_cost_savings / config.current_housing_cost * 100
            if config.current_housing_cost
            else 0.0
        ),
    }


def project_house_hack_exit(config: HouseHackConfiguration) -> Dict:
    """Value of staying vs. moving out or selling after the first year."""
    financials = calculate_house_hack(config)

    occupancy = config.owner_unit.occupancy_rate or DEFAULT_OWNER_UNIT_OCCUPANCY
    future_property_value = config.purchase_price * (1 + config.future_property_value_change / 100)
    selling_costs = future_property_value * SELLING_COST_RATE

    return {
        "monthly_value_of_staying": financials["housing_cost_savings"],
        "annual_value_of_staying": financials["housing_cost_savings"] * 12,
        "future_owner_unit_income": config.owner_unit.market_rent * occupancy / 100,
        "future_property_value": future_property_value,
        "selling_costs": selling_costs,
        "equity_gain": future_property_value - config.purchase_price - selling_costs,
    }
