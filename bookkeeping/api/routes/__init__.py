"""
API Routes Package

Contains all route modules for the dashboard API.
"""

from .auth import router as auth_router
from .costs import router as costs_router
from .dashboard import router as dashboard_router
from .reports import router as reports_router
from .sales import router as sales_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "costs_router",
    "dashboard_router",
    "reports_router",
    "sales_router",
    "users_router",
]
