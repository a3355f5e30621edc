"""
API routes for the deal analyzer.
"""

from fastapi import APIRouter

from deal_analyzer.api import calculations, strategies

router = APIRouter()

# Include sub-routers
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
router.include_router(strategies.router, prefix="/calculate/strategies", tags=["strategies"])
