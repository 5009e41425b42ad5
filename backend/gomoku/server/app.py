import contextlib
from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route, WebSocketRoute

from gomoku.logic.rng import create_rng
from gomoku.messaging.router import MessageRouter
from gomoku.server.settings import GameServerSettings
from gomoku.server.websocket import websocket_endpoint
from gomoku.session.manager import SessionManager
from gomoku.session.registry import RoomRegistry
from shared.logging import setup_logging

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from starlette.requests import Request
    from starlette.websockets import WebSocket


async def create_room(request: "Request") -> JSONResponse:
    """Create a room without opening a connection; the caller shares the code."""
    session_manager: SessionManager = request.app.state.session_manager
    return JSONResponse({"code": session_manager.create_room_code()})


def build_session_manager(settings: GameServerSettings) -> SessionManager:
    rng = create_rng(settings.rng_seed)
    registry = RoomRegistry(rng, max_code_attempts=settings.max_code_attempts)
    return SessionManager(registry, rng, max_send_failures=settings.max_send_failures)


def create_app(
    settings: GameServerSettings | None = None,
    session_manager: SessionManager | None = None,
    message_router: MessageRouter | None = None,
) -> Starlette:
    if settings is None:
        settings = GameServerSettings()

    if session_manager is None:
        session_manager = build_session_manager(settings)

    if message_router is None:
        message_router = MessageRouter(session_manager)

    limits = settings.transport_limits()

    async def ws_endpoint(websocket: "WebSocket") -> None:
        await websocket_endpoint(websocket, message_router, limits)

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> "AsyncIterator[None]":
        yield
        await session_manager.shutdown()
        logger.info("game server stopped")

    routes = [
        Route("/api/create", create_room, methods=["GET", "POST"]),
        WebSocketRoute("/ws", ws_endpoint),
    ]

    app = Starlette(routes=routes, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )
    app.state.settings = settings
    app.state.session_manager = session_manager

    logger.info("game server ready")
    return app


def get_app() -> Starlette:  # pragma: no cover
    """ASGI application factory for production use (uvicorn --factory gomoku.server.app:get_app)."""
    settings = GameServerSettings()
    setup_logging(settings.log_dir)
    return create_app(settings=settings)
