# memhub/routers/__init__.py
"""
API routers for memhub.
"""

from memhub.routers.brain import router as brain_router

__all__ = ["brain_router"]
