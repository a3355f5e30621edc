"""
Projection Engine

Walks a deal month by month from acquisition to the end of the projection
horizon and records a financial snapshot for every month.

Two phases:
1. Rehab - no income; cash flow is the negative of the holding costs only
2. Operating - full income less every expense line

Each month resolves, in order: scheduled refinance, annual appreciation,
explicit value change, annual rent growth, explicit rent change, annual
expense inflation, explicit expense change and the capital-reserve notice.
Later steps overwrite the event description left by earlier ones.

The transition for one month is `advance_month(state, config)`, a pure
function returning the next state and that month's snapshot, so the engine
is just a fold of it over the horizon. Nothing is cached between calls.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from deal_analyzer.calculations.cashflow import (
    MonthlyIncome,
    MonthlyExpenses,
    expense_fields,
    calculate_capital_reserve_budget,
)
from deal_analyzer.calculations.irr import calculate_simple_irr
from deal_analyzer.calculations.mortgage import calculate_monthly_payment
from deal_analyzer.calculations.numeric import safe_divide, safe_power, round_half_up
from deal_analyzer.calculations.refinance import RefinanceParams, calculate_refinance

logger = logging.getLogger(__name__)

DEFAULT_ANNUAL_APPRECIATION_RATE = 0.03
DEFAULT_ANNUAL_RENT_GROWTH_RATE = 0.03
DEFAULT_PURCHASE_LOAN_TERM_YEARS = 30

# Legacy storage slot: an event at month 0 carrying a fractional value is a rate
RATE_SENTINEL_MONTH = 0

REHAB_COMPLETE_DESCRIPTION = "Rehabilitation completed, property ready for rental"


# =============================================================================
# CONFIGURATION
# =============================================================================


@dataclass
class HoldingCostFlags:
    """Expense categories carried while the property is being rehabbed."""

    mortgage: bool = False
    taxes: bool = False
    insurance: bool = False
    maintenance: bool = False
    property_management: bool = False
    utilities: bool = False
    other: bool = False


@dataclass
class PropertyAcquisition:
    """Purchase and rehab details."""

    purchase_price: float
    closing_costs: float = 0.0
    rehab_costs: float = 0.0
    rehab_duration_months: int = 0
    purchase_loan_amount: Optional[float] = None
    purchase_loan_rate: Optional[float] = None  # Annual rate as decimal
    purchase_loan_term_years: Optional[float] = None
    other_initial_costs: Optional[float] = None
    include_holding_costs: Optional[HoldingCostFlags] = None
    # Flat monthly holding cost; when set, the per-category flags are ignored
    custom_monthly_holding_cost: Optional[float] = None


@dataclass
class PropertyOperation:
    """
    Steady-state income and expense inputs.

    Percent fields are plain numbers (10 means 10%), unlike the fractional
    rates used on refinance events and growth settings.
    """

    monthly_rent: float = 0.0
    other_monthly_income: float = 0.0
    property_taxes: float = 0.0  # Annual
    insurance: float = 0.0  # Annual
    maintenance: float = 0.0  # Monthly
    property_management: float = 0.0  # Percent of rent
    utilities: float = 0.0  # Monthly
    vacancy_rate: float = 0.0  # Percent of rent
    other_expenses: float = 0.0  # Monthly


@dataclass
class RefinanceEvent:
    """Cash-out refinance scheduled for a month."""

    month: int
    after_repair_value: float
    refinance_ltv: float  # Fraction, e.g. 0.75
    refinance_rate: float  # Fraction
    refinance_term_years: float
    refinance_closing_costs: float = 0.0


@dataclass
class PropertyValueChangeEvent:
    """Absolute property value from a given month."""

    month: int
    new_value: float


@dataclass
class RentChangeEvent:
    """Absolute monthly rent from a given month."""

    month: int
    new_rent: float


@dataclass
class ExpenseChangeEvent:
    """Absolute amount for one expense line from a given month."""

    month: int
    expense_type: str  # A MonthlyExpenses field name, e.g. "taxes"
    new_amount: float

    def __post_init__(self):
        if self.expense_type not in expense_fields():
            raise ValueError(
                f"Unknown expense type '{self.expense_type}', "
                f"expected one of: {', '.join(expense_fields())}"
            )


@dataclass
class CapitalExpenseEvent:
    """Reserve budget line for a component that will need replacing."""

    component: str  # e.g. "Roof", "HVAC"
    lifespan: float  # Expected lifespan in years
    replacement_cost: float
    last_replaced: Optional[float] = None  # Years since last replacement
    monthly_budget: Optional[float] = None

    @property
    def budget(self) -> float:
        """Explicit monthly budget, or replacement cost spread over the lifespan."""
        if self.monthly_budget is not None:
            return self.monthly_budget
        return calculate_capital_reserve_budget(self.replacement_cost, self.lifespan)


@dataclass
class ProjectionConfig:
    """Everything the engine needs; never mutated by it."""

    acquisition: PropertyAcquisition
    operation: PropertyOperation
    projection_months: int
    annual_expense_appreciation_rate: Optional[float] = None
    # Explicit growth rates; when unset the legacy month-0 entries, then 3%, apply
    annual_appreciation_rate: Optional[float] = None
    annual_rent_growth_rate: Optional[float] = None
    refinance_events: List[RefinanceEvent] = field(default_factory=list)
    property_value_changes: List[PropertyValueChangeEvent] = field(default_factory=list)
    rent_change_events: List[RentChangeEvent] = field(default_factory=list)
    expense_change_events: List[ExpenseChangeEvent] = field(default_factory=list)
    capital_expense_events: List[CapitalExpenseEvent] = field(default_factory=list)


# =============================================================================
# RESULTS
# =============================================================================


@dataclass
class MonthlySnapshot:
    """Financial position at the end of one month."""

    month: int
    property_value: float
    total_investment: float
    remaining_investment: float
    loan_balance: float
    monthly_income: MonthlyIncome
    monthly_expenses: MonthlyExpenses
    cash_flow: float
    total_cash_flow: float
    equity: float
    cash_on_cash: float  # This month's cash flow annualized over remaining investment
    total_return: float  # (equity + cumulative cash flow - investment) / investment
    annualized_return: float
    event_description: Optional[str] = None


@dataclass
class ProjectionSummary:
    """Headline figures derived from the first and last snapshots."""

    total_investment: float
    remaining_investment: float
    total_cash_flow: float
    final_property_value: float
    final_equity: float
    final_loan_balance: float
    total_appreciation: float
    average_monthly_cash_flow: float
    cash_on_cash_return: float
    return_on_investment: float
    internal_rate_of_return: float  # Monthly rate; 0 when the search did not converge
    irr_converged: bool
    successful_brrrr: bool  # Remaining investment <= 0 at the final month


@dataclass
class ProjectionResult:
    monthly_snapshots: List[MonthlySnapshot]
    summary: ProjectionSummary


@dataclass
class ProjectionState:
    """Values carried from one month to the next."""

    month: int  # Next month to simulate (1-based)
    property_value: float
    total_investment: float
    remaining_investment: float
    loan_balance: float
    total_cash_flow: float
    current_rent: float
    is_rehab: bool
    rehab_months_left: int
    expenses: MonthlyExpenses


# =============================================================================
# SETUP
# =============================================================================


def calculate_total_investment(acquisition: PropertyAcquisition) -> float:
    """Purchase price + closing + rehab + other initial costs."""
    return (
        acquisition.purchase_price
        + acquisition.closing_costs
        + acquisition.rehab_costs
        + (acquisition.other_initial_costs or 0)
    )


def calculate_capital_reserves(events: List[CapitalExpenseEvent]) -> float:
    """Standing monthly capital reserve budget across all components."""
    return sum(event.budget for event in events)


def rent_based_expenses(
    expenses: MonthlyExpenses, rent: float, operation: PropertyOperation
) -> MonthlyExpenses:
    """Recompute management fee and vacancy allowance for a new rent."""
    return replace(
        expenses,
        property_management=rent * (operation.property_management / 100),
        vacancy_allowance=rent * (operation.vacancy_rate / 100),
    )


def seed_expenses(config: ProjectionConfig) -> MonthlyExpenses:
    """Build the month-1 expense record from the operation inputs."""
    acquisition = config.acquisition
    operation = config.operation
    loan_amount = acquisition.purchase_loan_amount or 0

    mortgage = 0.0
    if loan_amount > 0:
        mortgage = calculate_monthly_payment(
            loan_amount,
            acquisition.purchase_loan_rate or 0,
            acquisition.purchase_loan_term_years or DEFAULT_PURCHASE_LOAN_TERM_YEARS,
        )

    expenses = MonthlyExpenses(
        mortgage=mortgage,
        taxes=operation.property_taxes / 12,
        insurance=operation.insurance / 12,
        maintenance=operation.maintenance,
        utilities=operation.utilities,
        other_expenses=operation.other_expenses,
        capital_reserves=calculate_capital_reserves(config.capital_expense_events),
    )
    return rent_based_expenses(expenses, operation.monthly_rent, operation)


def initial_state(config: ProjectionConfig) -> ProjectionState:
    """State before month 1."""
    total_investment = calculate_total_investment(config.acquisition)
    rehab_months = config.acquisition.rehab_duration_months

    return ProjectionState(
        month=1,
        property_value=config.acquisition.purchase_price,
        total_investment=total_investment,
        remaining_investment=total_investment,
        loan_balance=config.acquisition.purchase_loan_amount or 0,
        total_cash_flow=0.0,
        current_rent=config.operation.monthly_rent,
        is_rehab=rehab_months > 0,
        rehab_months_left=rehab_months,
        expenses=seed_expenses(config),
    )


def calculate_monthly_holding_cost(
    acquisition: PropertyAcquisition, expenses: MonthlyExpenses
) -> float:
    """Monthly holding cost during rehab: custom flat amount, or the flagged expense lines."""
    if acquisition.custom_monthly_holding_cost is not None:
        return acquisition.custom_monthly_holding_cost

    flags = acquisition.include_holding_costs or HoldingCostFlags()
    holding = 0.0

    if flags.mortgage:
        holding += expenses.mortgage
    if flags.taxes:
        holding += expenses.taxes
    if flags.insurance:
        holding += expenses.insurance
    if flags.maintenance:
        holding += expenses.maintenance
    if flags.property_management:
        holding += expenses.property_management
    if flags.utilities:
        holding += expenses.utilities
    if flags.other:
        holding += expenses.other_expenses

    return holding


# =============================================================================
# RATES AND EVENTS
# =============================================================================


def _find_event(events: list, month: int):
    """First event scheduled for the month, if any."""
    return next((event for event in events if event.month == month), None)


def _sentinel_rate(value) -> Optional[float]:
    if isinstance(value, (int, float)) and 0 < value < 1:
        return value
    return None


def resolve_appreciation_rate(config: ProjectionConfig) -> float:
    """
    Annual property appreciation rate.

    The explicit config field wins; otherwise a month-0 value-change entry
    with a value in (0, 1) is read as the rate (kept for deals saved in the
    older format); otherwise 3%.
    """
    if config.annual_appreciation_rate is not None:
        return config.annual_appreciation_rate

    legacy = _find_event(config.property_value_changes, RATE_SENTINEL_MONTH)
    if legacy is not None and _sentinel_rate(legacy.new_value) is not None:
        return legacy.new_value

    return DEFAULT_ANNUAL_APPRECIATION_RATE


def resolve_rent_growth_rate(config: ProjectionConfig) -> float:
    """Annual rent growth rate, resolved like the appreciation rate."""
    if config.annual_rent_growth_rate is not None:
        return config.annual_rent_growth_rate

    legacy = _find_event(config.rent_change_events, RATE_SENTINEL_MONTH)
    if legacy is not None and _sentinel_rate(legacy.new_rent) is not None:
        return legacy.new_rent

    return DEFAULT_ANNUAL_RENT_GROWTH_RATE


def is_anniversary(month: int) -> bool:
    """Year-anniversary months (12, 24, ...) get the periodic growth rules."""
    return month > 1 and month % 12 == 0


def _money(value: float) -> str:
    if float(value).is_integer():
        return f"${value:,.0f}"
    return f"${value:,.2f}"


# =============================================================================
# ENGINE
# =============================================================================


def advance_month(
    state: ProjectionState, config: ProjectionConfig
) -> Tuple[ProjectionState, MonthlySnapshot]:
    """
    Simulate one month.

    Args:
        state: State before the month (state.month is the month simulated)
        config: Projection configuration

    Returns:
        Tuple of (state for the following month, snapshot of this month)
    """
    month = state.month
    property_value = state.property_value
    remaining_investment = state.remaining_investment
    loan_balance = state.loan_balance
    current_rent = state.current_rent
    expenses = replace(state.expenses)
    operation = config.operation
    description = ""

    # 1. Scheduled refinance, against whatever capital is still stranded
    refinance_event = _find_event(config.refinance_events, month)
    if refinance_event is not None:
        property_value = refinance_event.after_repair_value

        outcome = calculate_refinance(
            RefinanceParams(
                after_repair_value=refinance_event.after_repair_value,
                total_investment=remaining_investment,
                refinance_ltv=refinance_event.refinance_ltv,
                refinance_rate=refinance_event.refinance_rate,
                refinance_term_years=refinance_event.refinance_term_years,
                refinance_closing_costs=refinance_event.refinance_closing_costs,
            )
        )

        loan_balance = outcome.new_loan_amount
        remaining_investment = outcome.remaining_investment
        expenses.mortgage = outcome.new_monthly_payment

        description = (
            f"Refinanced property at {round_half_up(refinance_event.refinance_ltv * 100):.0f}% LTV"
        )
        if outcome.is_brrrr_successful:
            description += " - Successfully pulled out all capital"
        logger.debug(f"Month {month}: refinance, new loan {outcome.new_loan_amount}")

    # 2. Annual appreciation unless an explicit value change targets this month
    value_change = _find_event(config.property_value_changes, month)
    if is_anniversary(month) and value_change is None:
        property_value = round_half_up(property_value * (1 + resolve_appreciation_rate(config)))
        description = f"Property value increased to {_money(property_value)} (annual appreciation)"

    # 3. Explicit value change
    if value_change is not None:
        property_value = value_change.new_value
        description = f"Property value changed to {_money(value_change.new_value)}"

    # 4. Annual rent growth unless an explicit rent change targets this month
    rent_change = _find_event(config.rent_change_events, month)
    if is_anniversary(month) and rent_change is None:
        current_rent = round_half_up(current_rent * (1 + resolve_rent_growth_rate(config)))
        expenses = rent_based_expenses(expenses, current_rent, operation)
        description = f"Rent increased to {_money(current_rent)} per month (annual increase)"

    # 5. Explicit rent change
    if rent_change is not None:
        current_rent = rent_change.new_rent
        expenses = rent_based_expenses(expenses, current_rent, operation)
        description = f"Rent changed to {_money(rent_change.new_rent)} per month"

    # 6. Annual expense inflation (mortgage excluded)
    expense_change = _find_event(config.expense_change_events, month)
    expense_rate = config.annual_expense_appreciation_rate
    if expense_rate and is_anniversary(month) and expense_change is None:
        for name in expense_fields():
            if name != "mortgage":
                setattr(expenses, name, getattr(expenses, name) * (1 + expense_rate))
        description = f"Operating expenses increased by {expense_rate * 100:.1f}% (annual increase)"

    # 7. Explicit expense change
    if expense_change is not None:
        setattr(expenses, expense_change.expense_type, expense_change.new_amount)
        description = (
            f"{expense_change.expense_type} expense changed to {_money(expense_change.new_amount)}"
        )

    # 8. Capital reserve notice
    if month == 1 and expenses.capital_reserves > 0:
        description = (
            f"Started monthly capital expense budgeting: ${expenses.capital_reserves:.2f}/month"
        )

    if state.is_rehab:
        income = MonthlyIncome(rent=0.0, other_income=0.0)
        cash_flow = -calculate_monthly_holding_cost(config.acquisition, expenses)
    else:
        income = MonthlyIncome(rent=current_rent, other_income=operation.other_monthly_income)
        cash_flow = income.total - expenses.total

    total_cash_flow = state.total_cash_flow + cash_flow
    equity = property_value - loan_balance
    total_investment = state.total_investment

    cash_on_cash = 0.0
    if remaining_investment > 0:
        cash_on_cash = safe_divide(cash_flow * 12, remaining_investment)

    total_return = safe_divide(equity + total_cash_flow - total_investment, total_investment)
    annualized_return = 0.0
    if month > 0:
        annualized_return = safe_power(1 + total_return, 12 / month) - 1

    is_rehab = state.is_rehab
    rehab_months_left = state.rehab_months_left
    if is_rehab and rehab_months_left > 0:
        rehab_months_left -= 1
        if rehab_months_left == 0:
            is_rehab = False
            # Events in the final rehab month keep their own description
            if not description:
                description = REHAB_COMPLETE_DESCRIPTION

    snapshot = MonthlySnapshot(
        month=month,
        property_value=property_value,
        total_investment=total_investment,
        remaining_investment=remaining_investment,
        loan_balance=loan_balance,
        monthly_income=income,
        monthly_expenses=replace(expenses),
        cash_flow=cash_flow,
        total_cash_flow=total_cash_flow,
        equity=equity,
        cash_on_cash=cash_on_cash,
        total_return=total_return,
        annualized_return=annualized_return,
        event_description=description or None,
    )

    next_state = ProjectionState(
        month=month + 1,
        property_value=property_value,
        total_investment=total_investment,
        remaining_investment=remaining_investment,
        loan_balance=loan_balance,
        total_cash_flow=total_cash_flow,
        current_rent=current_rent,
        is_rehab=is_rehab,
        rehab_months_left=rehab_months_left,
        expenses=expenses,
    )

    return next_state, snapshot


def opening_snapshot(state: ProjectionState) -> MonthlySnapshot:
    """Month-0 position, used as the baseline when the horizon is empty."""
    equity = state.property_value - state.loan_balance
    return MonthlySnapshot(
        month=0,
        property_value=state.property_value,
        total_investment=state.total_investment,
        remaining_investment=state.remaining_investment,
        loan_balance=state.loan_balance,
        monthly_income=MonthlyIncome(),
        monthly_expenses=replace(state.expenses),
        cash_flow=0.0,
        total_cash_flow=0.0,
        equity=equity,
        cash_on_cash=0.0,
        total_return=safe_divide(equity - state.total_investment, state.total_investment),
        annualized_return=0.0,
    )


def build_irr_cash_flows(snapshots: List[MonthlySnapshot], first: MonthlySnapshot) -> List[float]:
    """Initial investment, each month's cash flow, and equity realized at the end."""
    final = snapshots[-1] if snapshots else first
    cash_flows = [-first.total_investment] + [s.cash_flow for s in snapshots]
    cash_flows[-1] += final.property_value - final.loan_balance
    return cash_flows


def build_summary(snapshots: List[MonthlySnapshot], first: MonthlySnapshot) -> ProjectionSummary:
    """Derive the summary from the first and final snapshots."""
    final = snapshots[-1] if snapshots else first

    irr = calculate_simple_irr(build_irr_cash_flows(snapshots, first))
    irr_converged = irr is not None
    if not irr_converged:
        # Could not compute: reported as 0, flagged by irr_converged
        logger.debug("IRR search did not converge, reporting 0")
        irr = 0.0

    cash_on_cash_return = 0.0
    if final.remaining_investment > 0:
        cash_on_cash_return = safe_divide(final.cash_flow * 12, final.remaining_investment)

    return ProjectionSummary(
        total_investment=first.total_investment,
        remaining_investment=final.remaining_investment,
        total_cash_flow=final.total_cash_flow,
        final_property_value=final.property_value,
        final_equity=final.equity,
        final_loan_balance=final.loan_balance,
        total_appreciation=final.property_value - first.property_value,
        average_monthly_cash_flow=safe_divide(final.total_cash_flow, len(snapshots)),
        cash_on_cash_return=cash_on_cash_return,
        return_on_investment=safe_divide(
            final.total_cash_flow + final.equity - first.equity, first.total_investment
        ),
        internal_rate_of_return=irr,
        irr_converged=irr_converged,
        successful_brrrr=final.remaining_investment <= 0,
    )


def generate_projection(config: ProjectionConfig, validate: bool = False) -> ProjectionResult:
    """
    Generate a month-by-month projection of a deal.

    Args:
        config: Projection configuration (not modified)
        validate: Reject degenerate inputs with ValueError instead of letting
            them surface as NaN/Infinity in the results

    Returns:
        ProjectionResult with one snapshot per month and the summary
    """
    if validate:
        from deal_analyzer.calculations.validation import validate_projection_config

        validate_projection_config(config)

    logger.debug(f"Generating projection for {config.projection_months} months")

    state = initial_state(config)
    opening = opening_snapshot(state)
    snapshots: List[MonthlySnapshot] = []

    while state.month <= config.projection_months:
        state, snapshot = advance_month(state, config)
        snapshots.append(snapshot)

    first = snapshots[0] if snapshots else opening
    return ProjectionResult(monthly_snapshots=snapshots, summary=build_summary(snapshots, first))
