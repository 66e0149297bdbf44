"""
FastAPI WebSocket Room Chat Relay
Real-time room chat with presence, typing indicators and monitoring endpoints
"""

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
import uuid
import uvicorn

from chat_relay import (
    RoomRegistry,
    RateLimiter,
    Broadcaster,
    SessionHandler,
    StatusQuery,
    get_logger,
    log_websocket_event,
    log_system_event,
    HOST,
    PORT,
    ALLOWED_ORIGINS,
    WS_PING_INTERVAL,
    WS_PING_TIMEOUT
)

logger = get_logger()

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    log_system_event("startup", origins=",".join(ALLOWED_ORIGINS))
    yield
    log_system_event("shutdown", open_connections=app.state.broadcaster.connection_count())

def create_app(rate_limiter: Optional[RateLimiter] = None) -> FastAPI:
    """
    Build the application with its own registry and collaborators

    Args:
        rate_limiter: Rate limiter to use (a default one is created if omitted)

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Room Chat Relay",
        description="Real-time room chat with presence and typing indicators",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    rate_limiter = rate_limiter or RateLimiter()
    registry = RoomRegistry(rate_limiter)
    broadcaster = Broadcaster(registry)

    app.state.rate_limiter = rate_limiter
    app.state.registry = registry
    app.state.broadcaster = broadcaster
    app.state.status = StatusQuery(registry)

    @app.get("/api/health")
    async def health_check():
        """Process status with current room and user counts"""
        return await app.state.status.health()

    @app.get("/api/rooms")
    async def list_rooms():
        """Every active room with its members"""
        return await app.state.status.rooms()

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """Main WebSocket endpoint: one SessionHandler per connection"""
        connection_id = uuid.uuid4().hex

        await websocket.accept()
        client_ip = websocket.client.host if websocket.client else "unknown"
        log_websocket_event("connection_accepted", connection_id, client_ip=client_ip)

        broadcaster.register(connection_id, websocket)
        handler = SessionHandler(connection_id, registry, broadcaster, rate_limiter)

        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    log_websocket_event("disconnected", connection_id, code=message.get("code"))
                    break

                if message.get("text") is not None:
                    await handler.handle_frame(message["text"])
                else:
                    await handler.handle_binary_frame(message.get("bytes") or b"")

        except WebSocketDisconnect as e:
            log_websocket_event("disconnected", connection_id, code=e.code)

        except Exception as e:
            logger.exception(f"WebSocket error on {connection_id}: {e}")
            try:
                await websocket.close(code=1011)
            except RuntimeError as close_error:
                # Transport already gone
                log_websocket_event("close_failed", connection_id, error=str(close_error))

        finally:
            await handler.on_disconnect()
            broadcaster.unregister(connection_id)

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """Hide internal detail from HTTP clients"""
        logger.error(f"Unhandled exception on {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return app

app = create_app()

if __name__ == "__main__":
    logger.info(f"Starting Room Chat Relay on {HOST}:{PORT}...")

    uvicorn.run(
        "main:app",
        host=HOST,
        port=PORT,
        reload=False,
        log_level="info",
        access_log=True,
        ws_ping_interval=WS_PING_INTERVAL,
        ws_ping_timeout=WS_PING_TIMEOUT,
    )
