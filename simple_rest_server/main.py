"""
Main application entry point for the Simple REST Server.
"""
import argparse
import socket
import time
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from simple_rest_server.api.routes import build_router, route_not_found
from simple_rest_server.core.config import Settings, settings as default_settings
from simple_rest_server.core.exceptions import (
    BindError,
    generic_error_handler,
    http_error_handler
)
from simple_rest_server.core.logging import logger, setup_logging


def create_app(settings: Settings = default_settings) -> FastAPI:
    """
    Create the FastAPI application with the static route table mounted.
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} started")
        yield
        logger.info(f"{settings.PROJECT_NAME} shutting down...")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=None,  # Keep the route surface to the route table
        docs_url=None,
        redoc_url=None,
        redirect_slashes=False,  # "/health/" is an unknown path, not a redirect
        lifespan=lifespan
    )

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    @app.middleware("http")
    async def log_request_time(request: Request, call_next):
        """
        Middleware to log request processing time.
        """
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        logger.debug(f"Request {request.method} {request.url.path} processed in {process_time:.4f}s")
        response.headers["X-Process-Time"] = str(process_time)

        return response

    app.include_router(build_router())
    app.router.default = route_not_found

    return app


app = create_app()


def bind_socket(host: str, port: int) -> socket.socket:
    """
    Bind a listening TCP socket, raising BindError when the address is unavailable.
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as exc:
        sock.close()
        raise BindError(host, port, exc) from exc
    sock.set_inheritable(True)
    return sock


def build_server(asgi_app: FastAPI = app) -> uvicorn.Server:
    config = uvicorn.Config(
        asgi_app,
        log_config=None,  # Logging is handled by loguru
        log_level=default_settings.LOG_LEVEL.lower(),
        timeout_keep_alive=default_settings.TIMEOUT_KEEP_ALIVE,
    )
    return uvicorn.Server(config)


def serve(port: Optional[int] = None, host: Optional[str] = None) -> None:
    """
    Serve the application until interrupted.

    Binds the socket before handing it to uvicorn so that a busy or
    privileged port surfaces as BindError instead of a uvicorn exit.
    """
    host = host if host is not None else default_settings.HOST
    port = port if port is not None else default_settings.PORT

    sock = bind_socket(host, port)
    logger.info(f"Listening on {host}:{sock.getsockname()[1]}")

    server = build_server()
    try:
        server.run(sockets=[sock])
    finally:
        sock.close()


def _port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}")
    if not 0 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"port out of range: {port}")
    return port


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=default_settings.PROJECT_NAME)
    parser.add_argument("--host", default=default_settings.HOST,
                        help="Bind address (env HOST)")
    parser.add_argument("--port", type=_port, default=default_settings.PORT,
                        help="Listening port (env PORT)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging()

    try:
        serve(port=args.port, host=args.host)
    except BindError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
