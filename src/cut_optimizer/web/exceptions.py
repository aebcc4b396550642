"""Custom exceptions and error handlers for the REST API."""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cut_optimizer.application.config.loader import format_json_path
from cut_optimizer.domain import ValidationError


class RequestTimeoutError(Exception):
    """Raised when an optimization does not finish within the server timeout."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Request took longer than {timeout} seconds")


def error_content(error: str, error_type: str, details=None) -> dict:
    """Build the standard error envelope."""
    return {"error": error, "error_type": error_type, "details": details}


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with the FastAPI app."""

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = [
            {
                "path": format_json_path(tuple(err["loc"])),
                "message": err["msg"],
                "error_type": err["type"],
            }
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content=jsonable_encoder(
                error_content("Invalid request body", "invalid_request", details)
            ),
        )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=error_content(
                "Invalid optimizer input",
                "validation",
                [{"message": e} for e in exc.errors],
            ),
        )

    @app.exception_handler(RequestTimeoutError)
    async def timeout_handler(request: Request, exc: RequestTimeoutError) -> JSONResponse:
        return JSONResponse(
            status_code=408,
            content=error_content(
                "Request took too long", "timeout", {"timeout": exc.timeout}
            ),
        )
