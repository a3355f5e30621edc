"""
Strategy calculation API endpoints.

Short-term rental, multifamily and house-hack estimates.
"""

import logging
from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from deal_analyzer.api.calculations import ProjectionInput, finite_or_none
from deal_analyzer.calculations import strategies
from deal_analyzer.calculations.projection import generate_projection
from deal_analyzer.calculations.validation import validate_projection_config
from deal_analyzer.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


class ShortTermRentalIncomeInput(BaseModel):
    """Seasonal nightly rates, occupancy (percent) and per-night fees."""

    peak_season_daily: float = 150.0
    peak_season_occupancy: float = 90.0
    peak_season_months: List[int] = [6, 7, 8]
    mid_season_daily: float = 100.0
    mid_season_occupancy: float = 70.0
    mid_season_months: List[int] = [4, 5, 9, 10]
    low_season_daily: float = 80.0
    low_season_occupancy: float = 50.0
    low_season_months: List[int] = [1, 2, 3, 11, 12]
    cleaning_fee: float = 75.0
    other_fees: float = 25.0
    platform_fee: float = 3.0


class ShortTermRentalExpensesInput(BaseModel):
    """Short-term rental operating costs."""

    property_management_fee: float = 20.0
    cleaning_costs: float = 85.0
    supplies_per_month: float = 50.0
    utility_expenses: float = 200.0
    property_taxes: float = 2400.0
    insurance: float = 1800.0
    furniture_replacement_percent: float = 5.0
    maintenance_percent: float = 3.0
    advertising_per_month: float = 50.0
    subscription_services: float = 30.0
    other_expenses: float = 0.0


class ShortTermRentalInput(BaseModel):
    """Input for short-term rental estimates. Omitted sections use typical defaults."""

    income: ShortTermRentalIncomeInput = ShortTermRentalIncomeInput()
    expenses: ShortTermRentalExpensesInput = ShortTermRentalExpensesInput()


@router.post("/short-term-rental")
async def calculate_short_term_rental(inputs: ShortTermRentalInput):
    """Seasonal revenue, itemized expenses and monthly cash flow for a short-term rental."""
    income = strategies.ShortTermRentalIncome(**inputs.income.model_dump())
    expenses = strategies.ShortTermRentalExpenses(**inputs.expenses.model_dump())

    return {
        "revenue": strategies.calculate_str_revenue(income),
        "expenses": strategies.calculate_str_expenses(income, expenses),
    }


class RentalUnitInput(BaseModel):
    unit_number: str
    monthly_rent: float
    bedrooms: int = 0
    bathrooms: float = 0
    sqft: float = 0
    occupancy_rate: float = 95.0


class MultifamilyInput(BaseModel):
    """Rent roll, with an optional projection of the whole building."""

    units: List[RentalUnitInput]
    projection: Optional[ProjectionInput] = None


@router.post("/multifamily")
async def calculate_multifamily(inputs: MultifamilyInput):
    """Rent roll summary; when a projection is supplied its rent is replaced by the rent roll."""
    units = [strategies.RentalUnit(**unit.model_dump()) for unit in inputs.units]
    response = {"summary": strategies.summarize_units(units)}

    if inputs.projection is not None:
        settings = get_settings()
        try:
            config = inputs.projection.to_config()
            config.operation = strategies.operation_for_units(units, config.operation)
            if settings.validate_projection_inputs:
                validate_projection_config(config, settings.max_projection_months)
        except ValueError as e:
            logger.warning(f"Rejected multifamily projection: {e}")
            raise HTTPException(status_code=400, detail=str(e))

        response["projection"] = finite_or_none(asdict(generate_projection(config)))

    return response


class OwnerUnitInput(BaseModel):
    unit_number: str = "A"
    bedrooms: int = 2
    bathrooms: float = 1
    sqft: float = 900
    market_rent: float = 1200.0
    personal_usage: float = 100.0
    occupancy_rate: Optional[float] = None


class HouseHackInput(BaseModel):
    """Owner-occupied deal inputs."""

    owner_unit: OwnerUnitInput = OwnerUnitInput()
    current_housing_cost: float = 1500.0
    personal_utilities: float = 150.0
    combined_utilities: float = 100.0
    combined_insurance: float = 1200.0
    combined_property_tax: float = 2400.0
    rental_units: List[RentalUnitInput] = []
    future_property_value_change: float = 3.0
    purchase_price: float = 0.0


@router.post("/house-hack")
async def calculate_house_hack(inputs: HouseHackInput):
    """Net housing cost, savings and exit scenarios for a house hack."""
    config = strategies.HouseHackConfiguration(
        owner_unit=strategies.OwnerUnit(**inputs.owner_unit.model_dump()),
        current_housing_cost=inputs.current_housing_cost,
        personal_utilities=inputs.personal_utilities,
        combined_utilities=inputs.combined_utilities,
        combined_insurance=inputs.combined_insurance,
        combined_property_tax=inputs.combined_property_tax,
        rental_units=[strategies.RentalUnit(**unit.model_dump()) for unit in inputs.rental_units],
        future_property_value_change=inputs.future_property_value_change,
        purchase_price=inputs.purchase_price,
    )

    return {
        "financials": strategies.calculate_house_hack(config),
        "exit": strategies.project_house_hack_exit(config),
    }
