"""API routers for the REST API."""

from cut_optimizer.web.routers.optimize import router as optimize_router

__all__ = ["optimize_router"]
