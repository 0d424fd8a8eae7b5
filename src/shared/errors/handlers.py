"""Exception handlers for FastAPI.

Transforms application and framework errors into unified HTTP responses.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.shared.context import trace_id_var

from .base import AppError
from .schemas import ErrorResponse

logger = logging.getLogger(__name__)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers in a FastAPI application.

    Registers handlers for:
    - Application errors (AppError and its taxonomy)
    - Request body validation errors (RequestValidationError)
    - HTTP errors (StarletteHTTPException)
    - Unexpected exceptions (Exception)
    """

    @app.exception_handler(AppError)
    async def app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
        """Render an AppError with the status its class carries."""
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_response().model_dump(),
            headers={"X-Error-Code": exc.code},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Render malformed request bodies (wrong JSON types and the like)."""
        response = ErrorResponse(
            error="VALIDATION",
            message="Input validation error",
            details={"errors": jsonable_encoder(exc.errors())},
            trace_id=trace_id_var.get(),
        )
        return JSONResponse(
            status_code=400,
            content=response.model_dump(),
            headers={"X-Error-Code": "VALIDATION"},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Render standard HTTP exceptions from FastAPI/Starlette."""
        error_code = f"HTTP_{exc.status_code}"
        response = ErrorResponse(
            error=error_code,
            message=str(exc.detail),
            details={},
            trace_id=trace_id_var.get(),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=response.model_dump(),
            headers={"X-Error-Code": error_code},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Last line of defense: log the traceback, answer with a generic 500."""
        logger.exception("CRITICAL: Unhandled exception")

        response = ErrorResponse(
            error="INTERNAL_SERVER_ERROR",
            message="Internal server error",
            details={},
            trace_id=trace_id_var.get(),
        )
        return JSONResponse(
            status_code=500,
            content=response.model_dump(),
            headers={"X-Error-Code": "INTERNAL_SERVER_ERROR"},
        )
