"""
Deal Analyzer

Real estate deal analysis: month-by-month projections of BRRRR, rental,
short-term rental, multifamily and house-hack investments.
"""

__version__ = "0.1.0"
