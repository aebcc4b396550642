"""FastAPI application factory."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from cut_optimizer.web.exceptions import register_exception_handlers
from cut_optimizer.web.middleware import ContentLengthLimitMiddleware, LoadSheddingMiddleware
from cut_optimizer.web.routers import optimize_router
from cut_optimizer.web.schemas import HealthSchema
from cut_optimizer.web.settings import ServerSettings


def create_app(settings: ServerSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Server settings; defaults are used when omitted.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or ServerSettings()

    app = FastAPI(
        title="Cut Optimizer 2D",
        description="Optimizes rectangular cut pieces from sheet goods",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings

    # CORS middleware for browser access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Added last runs first: shed load, then check size, then compress.
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(
        ContentLengthLimitMiddleware, max_content_length=settings.max_content_length
    )
    app.add_middleware(LoadSheddingMiddleware, max_requests=settings.max_requests)

    register_exception_handlers(app)

    app.include_router(optimize_router)

    @app.get("/health", response_model=HealthSchema)
    async def health_check() -> HealthSchema:
        """Health check endpoint."""
        return HealthSchema(status="healthy")

    return app


# Application instance for ASGI servers (uvicorn)
app = create_app()
