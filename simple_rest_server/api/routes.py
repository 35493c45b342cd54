"""
Route table and handlers for the Simple REST Server.

The table maps ``(method, path)`` to a handler and is fixed at import time.
"""
from types import MappingProxyType
from typing import Awaitable, Callable, Mapping, Tuple

from fastapi import APIRouter, Response, status
from fastapi.responses import PlainTextResponse
from starlette.websockets import WebSocketClose

from simple_rest_server.core.exceptions import NotFoundError


Handler = Callable[[], Awaitable[Response]]


async def endpoint1() -> PlainTextResponse:
    return PlainTextResponse("Hello from endpoint 1")


async def endpoint2() -> PlainTextResponse:
    return PlainTextResponse("Hello from endpoint 2")


async def endpoint3() -> PlainTextResponse:
    return PlainTextResponse("Hello from endpoint 3")


async def health() -> Response:
    """
    Liveness probe. Always 200 with an empty body.
    """
    return Response(status_code=status.HTTP_200_OK)


ROUTE_TABLE: Mapping[Tuple[str, str], Handler] = MappingProxyType({
    ("GET", "/endpoint1"): endpoint1,
    ("GET", "/endpoint2"): endpoint2,
    ("GET", "/endpoint3"): endpoint3,
    ("GET", "/health"): health,
})


def build_router(table: Mapping[Tuple[str, str], Handler] = ROUTE_TABLE) -> APIRouter:
    """
    Build an APIRouter with one route per table entry.
    """
    router = APIRouter()
    for (method, path), handler in table.items():
        router.add_api_route(
            path,
            handler,
            methods=[method],
            status_code=status.HTTP_200_OK,
            include_in_schema=False,
        )
    return router


async def route_not_found(scope, receive, send) -> None:
    """
    Fallback for requests that match no route.

    HTTP requests get a 404; websocket handshakes are closed before accept.
    """
    if scope["type"] == "http":
        raise NotFoundError()
    await WebSocketClose()(scope, receive, send)
