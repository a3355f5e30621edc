"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from deal_analyzer.calculations.projection import (
    PropertyAcquisition,
    PropertyOperation,
    ProjectionConfig,
    RefinanceEvent,
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")


@pytest.fixture
def rehab_config():
    """Purchase 100k, closing 3k, 30k rehab over 3 months, rent 1200 with 10% PM and 5% vacancy."""
    return ProjectionConfig(
        acquisition=PropertyAcquisition(
            purchase_price=100000,
            closing_costs=3000,
            rehab_costs=30000,
            rehab_duration_months=3,
        ),
        operation=PropertyOperation(
            monthly_rent=1200,
            property_management=10,
            vacancy_rate=5,
        ),
        projection_months=12,
    )


@pytest.fixture
def refinance_config():
    """Same deal with a 2-month rehab and a 75% LTV refinance at month 3."""
    return ProjectionConfig(
        acquisition=PropertyAcquisition(
            purchase_price=100000,
            closing_costs=3000,
            rehab_costs=30000,
            rehab_duration_months=2,
        ),
        operation=PropertyOperation(
            monthly_rent=1200,
            property_management=10,
            vacancy_rate=5,
        ),
        projection_months=12,
        refinance_events=[
            RefinanceEvent(
                month=3,
                after_repair_value=160000,
                refinance_ltv=0.75,
                refinance_rate=0.05,
                refinance_term_years=30,
                refinance_closing_costs=3500,
            )
        ],
    )


@pytest.fixture
def brrrr_config():
    """Purchase 100k, closing 2k, 20k rehab over 1 month, refinance at month 2."""
    return ProjectionConfig(
        acquisition=PropertyAcquisition(
            purchase_price=100000,
            closing_costs=2000,
            rehab_costs=20000,
            rehab_duration_months=1,
        ),
        operation=PropertyOperation(
            monthly_rent=1500,
            property_taxes=2400,
            insurance=1200,
            property_management=8,
            vacancy_rate=5,
        ),
        projection_months=24,
        refinance_events=[
            RefinanceEvent(
                month=2,
                after_repair_value=150000,
                refinance_ltv=0.75,
                refinance_rate=0.05,
                refinance_term_years=30,
                refinance_closing_costs=3000,
            )
        ],
    )


@pytest.fixture
def rental_config():
    """Turnkey rental: no rehab, no loan, 24 months."""
    return ProjectionConfig(
        acquisition=PropertyAcquisition(purchase_price=100000),
        operation=PropertyOperation(
            monthly_rent=1000,
            property_taxes=1200,
            insurance=600,
            maintenance=50,
        ),
        projection_months=24,
    )
