"""Credit Audit Engine - API Routers"""
from .audits import router as audits_router

__all__ = [
    "audits_router",
]
