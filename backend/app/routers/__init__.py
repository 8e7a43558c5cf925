# backend/app/routers/__init__.py
"""
API routers.

Each router handles a specific domain:
- instruments: Instruments and their manual prices
- purchases: Purchase records (by quantity or amount)
- goals: Savings goals with time-to-target projections
- dashboard: Totals and chart series
- portfolio: Export / import / reset of the whole portfolio
"""

from app.routers.dashboard import router as dashboard_router
from app.routers.goals import router as goals_router
from app.routers.instruments import router as instruments_router
from app.routers.portfolio import router as portfolio_router
from app.routers.purchases import router as purchases_router

__all__ = [
    "instruments_router",
    "purchases_router",
    "goals_router",
    "dashboard_router",
    "portfolio_router",
]
