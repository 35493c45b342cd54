"""
Custom exceptions and exception handlers for the Simple REST Server.
"""
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from simple_rest_server.core.logging import logger


class ServerError(Exception):
    """Base class for process-level server errors."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BindError(ServerError):
    """Exception raised when the listening socket cannot be bound."""
    def __init__(self, host: str, port: int, cause: Optional[OSError] = None):
        reason = cause.strerror if cause is not None and cause.strerror else str(cause or "unknown error")
        super().__init__(f"Cannot bind {host}:{port}: {reason}")
        self.host = host
        self.port = port
        self.cause = cause


class NotFoundError(StarletteHTTPException):
    """Raised when no route matches the requested path."""
    def __init__(self, detail: str = "Not Found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


# Exception handlers

async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handler for routing outcomes (404, 405) and other HTTP errors."""
    method = request.scope.get("method", "WEBSOCKET")
    logger.debug(f"HTTP {exc.status_code} for {method} {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.opt(exception=exc).error(f"Unhandled Exception: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )
