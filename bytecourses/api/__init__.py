"""API package."""

from .courses import router as courses_router
from .proposals import router as proposals_router

__all__ = [
    "proposals_router",
    "courses_router",
]
