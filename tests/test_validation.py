"""
Tests for projection input validation.
"""

from dataclasses import replace

import pytest

from deal_analyzer.calculations.projection import (
    PropertyValueChangeEvent,
    RefinanceEvent,
    RentChangeEvent,
)
from deal_analyzer.calculations.validation import validate_projection_config


def refinance_event(**overrides):
    params = dict(
        month=3,
        after_repair_value=160000,
        refinance_ltv=0.75,
        refinance_rate=0.05,
        refinance_term_years=30,
    )
    params.update(overrides)
    return RefinanceEvent(**params)


class TestValidateProjectionConfig:
    """Test fail-fast checks on projection inputs."""

    def test_valid_configs_pass(self, rehab_config, refinance_config, brrrr_config):
        for config in (rehab_config, refinance_config, brrrr_config):
            validate_projection_config(config, max_projection_months=600)

    def test_empty_horizon(self, rehab_config):
        with pytest.raises(ValueError, match="at least one month"):
            validate_projection_config(replace(rehab_config, projection_months=0))

    def test_horizon_limit(self, rehab_config):
        with pytest.raises(ValueError, match="cannot exceed 600"):
            validate_projection_config(replace(rehab_config, projection_months=601), 600)

    def test_horizon_unbounded_by_default(self, rehab_config):
        validate_projection_config(replace(rehab_config, projection_months=1200))

    @pytest.mark.parametrize(
        "field", ["purchase_price", "closing_costs", "rehab_costs", "rehab_duration_months"]
    )
    def test_negative_acquisition_inputs(self, rehab_config, field):
        acquisition = replace(rehab_config.acquisition, **{field: -1})
        with pytest.raises(ValueError, match="negative"):
            validate_projection_config(replace(rehab_config, acquisition=acquisition))

    def test_zero_loan_term(self, rehab_config):
        acquisition = replace(
            rehab_config.acquisition, purchase_loan_amount=80000, purchase_loan_term_years=0
        )
        with pytest.raises(ValueError, match="Purchase loan term"):
            validate_projection_config(replace(rehab_config, acquisition=acquisition))

    def test_zero_investment(self, rehab_config):
        acquisition = replace(
            rehab_config.acquisition, purchase_price=0, closing_costs=0, rehab_costs=0
        )
        with pytest.raises(ValueError, match="Total investment"):
            validate_projection_config(replace(rehab_config, acquisition=acquisition))

    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"month": 0}, "Refinance month"),
            ({"refinance_ltv": 0}, "LTV"),
            ({"refinance_ltv": 1.2}, "LTV"),
            ({"after_repair_value": 0}, "After-repair value"),
            ({"refinance_term_years": 0}, "Refinance term"),
        ],
    )
    def test_bad_refinance_events(self, rehab_config, overrides, message):
        config = replace(rehab_config, refinance_events=[refinance_event(**overrides)])
        with pytest.raises(ValueError, match=message):
            validate_projection_config(config)

    def test_negative_event_month(self, rehab_config):
        config = replace(rehab_config, rent_change_events=[RentChangeEvent(month=-1, new_rent=1300)])
        with pytest.raises(ValueError, match="Rent change month"):
            validate_projection_config(config)

    def test_month_zero_rate_entries_allowed(self, rehab_config):
        """Month-0 growth-rate entries are valid."""
        config = replace(
            rehab_config, property_value_changes=[PropertyValueChangeEvent(month=0, new_value=0.04)]
        )
        validate_projection_config(config)
