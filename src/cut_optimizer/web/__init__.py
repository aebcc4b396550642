"""FastAPI REST API for cut optimization.

Usage:
    cut-optimizer serve --port 3030
    uvicorn cut_optimizer.web.app:app
"""

from cut_optimizer.web.app import create_app
from cut_optimizer.web.settings import ServerSettings

__all__ = ["ServerSettings", "create_app"]
