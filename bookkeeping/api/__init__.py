"""
FastAPI Backend for the Bookkeeping Dashboard

Provides REST API endpoints for the dashboard frontend.
"""

from .main import app

__all__ = ["app"]
