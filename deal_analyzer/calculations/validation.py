"""
Projection Input Validation

Optional fail-fast checks for degenerate deal inputs. The projection engine
itself never validates; callers that would rather reject a deal than show
NaN/Infinity figures (the HTTP API, for one) run these first.
"""

from typing import Optional

from deal_analyzer.calculations.projection import (
    ProjectionConfig,
    calculate_total_investment,
)


def validate_projection_config(
    config: ProjectionConfig, max_projection_months: Optional[int] = None
) -> None:
    """
    Check a projection configuration for inputs that break the math.

    Args:
        config: Projection configuration
        max_projection_months: Optional upper bound on the horizon

    Raises:
        ValueError: Describing the first problem found
    """
    if config.projection_months < 1:
        raise ValueError("Projection must cover at least one month")
    if max_projection_months is not None and config.projection_months > max_projection_months:
        raise ValueError(f"Projection cannot exceed {max_projection_months} months")

    acquisition = config.acquisition
    if acquisition.purchase_price < 0:
        raise ValueError("Purchase price cannot be negative")
    if acquisition.closing_costs < 0:
        raise ValueError("Closing costs cannot be negative")
    if acquisition.rehab_costs < 0:
        raise ValueError("Rehab costs cannot be negative")
    if acquisition.rehab_duration_months < 0:
        raise ValueError("Rehab duration cannot be negative")

    if (acquisition.purchase_loan_amount or 0) > 0:
        term = acquisition.purchase_loan_term_years
        if term is not None and term <= 0:
            raise ValueError("Purchase loan term must be greater than zero")

    if calculate_total_investment(acquisition) <= 0:
        raise ValueError("Total investment must be greater than zero")

    for event in config.refinance_events:
        if event.month < 1:
            raise ValueError(f"Refinance month must be 1 or later, got {event.month}")
        if not 0 < event.refinance_ltv <= 1:
            raise ValueError(
                f"Refinance LTV must be in (0, 1], got {event.refinance_ltv} at month {event.month}"
            )
        if event.after_repair_value <= 0:
            raise ValueError(f"After-repair value must be positive at month {event.month}")
        if event.refinance_term_years <= 0:
            raise ValueError(f"Refinance term must be greater than zero at month {event.month}")

    for events, label in (
        (config.property_value_changes, "Property value change"),
        (config.rent_change_events, "Rent change"),
        (config.expense_change_events, "Expense change"),
    ):
        for event in events:
            if event.month < 0:
                raise ValueError(f"{label} month cannot be negative, got {event.month}")
