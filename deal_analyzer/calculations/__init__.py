"""
Financial Calculation Engine

Core calculation modules for real estate deal analysis.
Pure functions over plain floats; nothing here performs I/O.
"""

from deal_analyzer.calculations import (
    cashflow,
    irr,
    metrics,
    mortgage,
    projection,
    refinance,
    strategies,
    validation,
)
from deal_analyzer.calculations.projection import generate_projection

__all__ = [
    "cashflow",
    "irr",
    "metrics",
    "mortgage",
    "projection",
    "refinance",
    "strategies",
    "validation",
    "generate_projection",
]
