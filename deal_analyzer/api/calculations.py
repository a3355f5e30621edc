"""
Financial calculation API endpoints.

These endpoints accept inputs and return calculated results.
Nothing is stored; every request is computed fresh.
"""

import logging
import math
from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from deal_analyzer.calculations import cashflow, irr, metrics, mortgage, refinance
from deal_analyzer.calculations.projection import (
    CapitalExpenseEvent,
    ExpenseChangeEvent,
    HoldingCostFlags,
    PropertyAcquisition,
    PropertyOperation,
    PropertyValueChangeEvent,
    ProjectionConfig,
    RefinanceEvent,
    RentChangeEvent,
    generate_projection,
)
from deal_analyzer.calculations.validation import validate_projection_config
from deal_analyzer.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


def finite_or_none(value):
    """Replace NaN/Infinity with None throughout a result so it serializes as JSON."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: finite_or_none(item) for key, item in value.items()}
    if isinstance(value, list):
        return [finite_or_none(item) for item in value]
    return value


# =============================================================================
# PROJECTION
# =============================================================================


class HoldingCostsInput(BaseModel):
    """Expense categories carried during rehab."""

    mortgage: bool = False
    taxes: bool = False
    insurance: bool = False
    maintenance: bool = False
    property_management: bool = False
    utilities: bool = False
    other: bool = False


class AcquisitionInput(BaseModel):
    """Purchase and rehab inputs."""

    purchase_price: float
    closing_costs: float = 0.0
    rehab_costs: float = 0.0
    rehab_duration_months: int = 0
    purchase_loan_amount: Optional[float] = None
    purchase_loan_rate: Optional[float] = None
    purchase_loan_term_years: Optional[float] = None
    other_initial_costs: Optional[float] = None
    include_holding_costs: Optional[HoldingCostsInput] = None
    custom_monthly_holding_cost: Optional[float] = None


class OperationInput(BaseModel):
    """Rental income and expenses. Percent fields are plain numbers (10 = 10%)."""

    monthly_rent: float = 0.0
    other_monthly_income: float = 0.0
    property_taxes: float = 0.0
    insurance: float = 0.0
    maintenance: float = 0.0
    property_management: float = 0.0
    utilities: float = 0.0
    vacancy_rate: float = 0.0
    other_expenses: float = 0.0


class RefinanceEventInput(BaseModel):
    month: int
    after_repair_value: float
    refinance_ltv: float
    refinance_rate: float
    refinance_term_years: float
    refinance_closing_costs: float = 0.0


class PropertyValueChangeInput(BaseModel):
    month: int
    new_value: float


class RentChangeInput(BaseModel):
    month: int
    new_rent: float


class ExpenseChangeInput(BaseModel):
    month: int
    expense_type: str
    new_amount: float


class CapitalExpenseInput(BaseModel):
    component: str
    lifespan: float
    replacement_cost: float
    last_replaced: Optional[float] = None
    monthly_budget: Optional[float] = None


class ProjectionInput(BaseModel):
    """Input for a month-by-month deal projection."""

    acquisition: AcquisitionInput
    operation: OperationInput
    projection_months: int = 60
    annual_expense_appreciation_rate: Optional[float] = None
    annual_appreciation_rate: Optional[float] = None
    annual_rent_growth_rate: Optional[float] = None
    refinance_events: List[RefinanceEventInput] = []
    property_value_changes: List[PropertyValueChangeInput] = []
    rent_change_events: List[RentChangeInput] = []
    expense_change_events: List[ExpenseChangeInput] = []
    capital_expense_events: List[CapitalExpenseInput] = []

    def to_config(self) -> ProjectionConfig:
        """Convert to the engine's configuration (raises ValueError on bad expense types)."""
        holding = self.acquisition.include_holding_costs
        acquisition = PropertyAcquisition(
            **self.acquisition.model_dump(exclude={"include_holding_costs"}),
            include_holding_costs=HoldingCostFlags(**holding.model_dump()) if holding else None,
        )

        return ProjectionConfig(
            acquisition=acquisition,
            operation=PropertyOperation(**self.operation.model_dump()),
            projection_months=self.projection_months,
            annual_expense_appreciation_rate=self.annual_expense_appreciation_rate,
            annual_appreciation_rate=self.annual_appreciation_rate,
            annual_rent_growth_rate=self.annual_rent_growth_rate,
            refinance_events=[RefinanceEvent(**e.model_dump()) for e in self.refinance_events],
            property_value_changes=[
                PropertyValueChangeEvent(**e.model_dump()) for e in self.property_value_changes
            ],
            rent_change_events=[RentChangeEvent(**e.model_dump()) for e in self.rent_change_events],
            expense_change_events=[
                ExpenseChangeEvent(**e.model_dump()) for e in self.expense_change_events
            ],
            capital_expense_events=[
                CapitalExpenseEvent(**e.model_dump()) for e in self.capital_expense_events
            ],
        )


@router.post("/projection")
async def calculate_projection(inputs: ProjectionInput):
    """Generate monthly snapshots and the summary for a deal."""
    settings = get_settings()

    try:
        config = inputs.to_config()
        if settings.validate_projection_inputs:
            validate_projection_config(config, settings.max_projection_months)
    except ValueError as e:
        logger.warning(f"Rejected projection request: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    result = generate_projection(config)
    return finite_or_none(asdict(result))


# =============================================================================
# MORTGAGE
# =============================================================================


class LoanInput(BaseModel):
    """Input for loan payment and amortization."""

    principal: float
    annual_rate: float
    term_years: float


def _check_term(inputs: LoanInput):
    if inputs.term_years <= 0:
        logger.warning(f"Rejected loan request with term {inputs.term_years}")
        raise HTTPException(status_code=400, detail="Loan term must be greater than zero")


@router.post("/mortgage")
async def calculate_mortgage(inputs: LoanInput):
    """Monthly payment and lifetime totals for a fixed-rate loan."""
    _check_term(inputs)

    schedule = mortgage.calculate_amortization_schedule(
        inputs.principal, inputs.annual_rate, inputs.term_years
    )

    return {
        "monthly_payment": mortgage.calculate_monthly_payment(
            inputs.principal, inputs.annual_rate, inputs.term_years
        ),
        "total_paid": mortgage.calculate_total_paid(schedule),
        "total_interest": mortgage.calculate_total_interest(schedule),
    }


@router.post("/amortization")
async def calculate_amortization(inputs: LoanInput):
    """Generate loan amortization schedule."""
    _check_term(inputs)

    schedule = mortgage.calculate_amortization_schedule(
        inputs.principal, inputs.annual_rate, inputs.term_years
    )

    return {
        "schedule": schedule,
        "total_interest": mortgage.calculate_total_interest(schedule),
        "total_principal": sum(row["principal"] for row in schedule),
    }


# =============================================================================
# REFINANCE
# =============================================================================


class RefinanceInput(BaseModel):
    """Input for a cash-out refinance."""

    after_repair_value: float
    total_investment: float
    refinance_ltv: float
    refinance_rate: float
    refinance_term_years: float
    refinance_closing_costs: float = 0.0


class MinimumARVInput(BaseModel):
    total_investment: float
    refinance_ltv: float
    refinance_closing_costs: float = 0.0


class MaxPurchasePriceInput(BaseModel):
    after_repair_value: float
    rehab_costs: float
    refinance_ltv: float
    refinance_closing_costs: float = 0.0
    desired_cash_buffer: float = 0.0


def _check_ltv(ltv: float):
    if not 0 < ltv <= 1:
        logger.warning(f"Rejected refinance request with LTV {ltv}")
        raise HTTPException(status_code=400, detail="Refinance LTV must be in (0, 1]")


@router.post("/refinance")
async def calculate_refinance(inputs: RefinanceInput):
    """Outcome of a cash-out refinance."""
    _check_ltv(inputs.refinance_ltv)
    if inputs.refinance_term_years <= 0:
        raise HTTPException(status_code=400, detail="Refinance term must be greater than zero")

    outcome = refinance.calculate_refinance(refinance.RefinanceParams(**inputs.model_dump()))
    return asdict(outcome)


@router.post("/minimum-arv")
async def calculate_minimum_arv(inputs: MinimumARVInput):
    """Lowest ARV that recoups all capital on refinance."""
    _check_ltv(inputs.refinance_ltv)

    return {
        "minimum_arv": refinance.calculate_minimum_arv(
            inputs.total_investment, inputs.refinance_ltv, inputs.refinance_closing_costs
        )
    }


@router.post("/max-purchase-price")
async def calculate_max_purchase_price(inputs: MaxPurchasePriceInput):
    """Highest purchase price that still recoups all capital on refinance."""
    return {
        "max_purchase_price": refinance.calculate_max_purchase_price(
            inputs.after_repair_value,
            inputs.rehab_costs,
            inputs.refinance_ltv,
            inputs.refinance_closing_costs,
            inputs.desired_cash_buffer,
        )
    }


# =============================================================================
# RETURNS
# =============================================================================


class IRRInput(BaseModel):
    """Input for IRR calculation."""

    cash_flows: List[float]


class IRRResponse(BaseModel):
    """Response with IRR calculation."""

    irr: Optional[float] = None  # Per period; None when the search did not converge
    annual_irr: Optional[float] = None
    converged: bool
    npv_at_10_percent: float


@router.post("/irr", response_model=IRRResponse)
async def calculate_irr_endpoint(inputs: IRRInput):
    """Estimate IRR for monthly cash flows."""
    if len(inputs.cash_flows) < 2:
        raise HTTPException(status_code=400, detail="At least 2 cash flows required")

    irr_val = irr.calculate_simple_irr(inputs.cash_flows)

    return IRRResponse(
        irr=irr_val,
        annual_irr=irr.monthly_to_annual_irr(irr_val) if irr_val is not None else None,
        converged=irr_val is not None,
        npv_at_10_percent=irr.calculate_npv(inputs.cash_flows, 0.10),
    )


class DealMetricsInput(BaseModel):
    """Input for quick deal screening metrics."""

    purchase_price: float
    monthly_rent: float
    monthly_operating_expenses: float = 0.0  # Everything except debt service
    monthly_mortgage_payment: float = 0.0
    total_investment: float
    net_profit: Optional[float] = None
    hold_years: Optional[float] = None


@router.post("/metrics")
async def calculate_deal_metrics(inputs: DealMetricsInput):
    """Cap rate, GRM, cash-on-cash and rule-of-thumb checks for a deal."""
    income = cashflow.MonthlyIncome(rent=inputs.monthly_rent)
    expenses = cashflow.MonthlyExpenses(
        mortgage=inputs.monthly_mortgage_payment,
        other_expenses=inputs.monthly_operating_expenses,
    )
    monthly_cash_flow = cashflow.calculate_monthly_cash_flow(income, expenses)
    annual_noi = (inputs.monthly_rent - inputs.monthly_operating_expenses) * 12

    try:
        result = {
            "monthly_cash_flow": monthly_cash_flow,
            "cap_rate": metrics.calculate_cap_rate(annual_noi, inputs.purchase_price),
            "gross_rent_multiplier": metrics.calculate_grm(
                inputs.purchase_price, inputs.monthly_rent * 12
            ),
            "cash_on_cash_return": cashflow.calculate_cash_on_cash_return(
                monthly_cash_flow * 12, inputs.total_investment
            ),
            "expense_ratio": cashflow.calculate_expense_ratio(expenses.total, income.total),
            "meets_one_percent_rule": cashflow.meets_one_percent_rule(
                inputs.monthly_rent, inputs.purchase_price
            ),
            "fifty_percent_rule_cash_flow": cashflow.estimate_cash_flow_with_50_percent_rule(
                inputs.monthly_rent, inputs.monthly_mortgage_payment
            ),
        }

        if inputs.net_profit is not None:
            result["roi"] = metrics.calculate_roi(inputs.net_profit, inputs.total_investment)
            result["equity_multiple"] = metrics.calculate_equity_multiple(
                inputs.total_investment + inputs.net_profit, inputs.total_investment
            )
            if inputs.hold_years is not None:
                result["annualized_roi"] = metrics.calculate_annualized_roi(
                    inputs.net_profit, inputs.total_investment, inputs.hold_years
                )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return result
