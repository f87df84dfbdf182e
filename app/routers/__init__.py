"""
API routers for v1 endpoints.
"""

from app.routers.expiration import router as expiration_router

__all__ = [
    "expiration_router",
]
