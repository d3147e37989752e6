from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from routers.rooms import rooms_router
from registry import RoomRegistry
from dispatcher import SignalingDispatcher
from session import ConnectionSession
from typing import Optional
from logging_config import get_logger, setup_logging
import constants

# Setup logging
setup_logging(log_level=constants.LOG_LEVEL, log_file=constants.LOG_FILE)
logger = get_logger(__name__)


async def websocket_endpoint(websocket: WebSocket):
    """Signaling socket. Every text frame is one JSON signaling message."""
    dispatcher: SignalingDispatcher = websocket.app.state.dispatcher
    session = ConnectionSession(websocket)
    client = websocket.client
    logger.info(f"WebSocket connection {session.connection_id} from {client.host if client else 'unknown'}")

    await websocket.accept()
    try:
        if constants.WELCOME_MESSAGE:
            await session.send_text(constants.WELCOME_MESSAGE)

        message_count = 0
        while True:
            try:
                frame = await websocket.receive()
                if frame["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(frame.get("code", 1000))
            except WebSocketDisconnect as e:
                logger.info(f"WebSocket {session.connection_id} disconnected (code {e.code})")
                break
            # binary frames go through the same parser and are dropped if they aren't JSON
            data = frame.get("text")
            if data is None:
                data = frame.get("bytes") or b""
            message_count += 1
            logger.debug(f"Received message #{message_count} from connection {session.connection_id}")
            await dispatcher.dispatch(data, session)
    except Exception as e:
        logger.error(f"WebSocket error for connection {session.connection_id}: {e}", exc_info=True)
        try:
            await websocket.close()
        except Exception as close_error:
            logger.debug(f"Error closing WebSocket: {close_error}")
    finally:
        await dispatcher.disconnect(session)


def create_app(registry: Optional[RoomRegistry] = None, leave_on_disconnect: bool = constants.LEAVE_ON_DISCONNECT) -> FastAPI:
    app = FastAPI(title="signal-relay")

    # Configure CORS to allow all origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.registry = registry if registry is not None else RoomRegistry(capacity=constants.ROOM_CAPACITY)
    app.state.dispatcher = SignalingDispatcher(app.state.registry, leave_on_disconnect=leave_on_disconnect)

    app.include_router(rooms_router)
    app.add_api_websocket_route("/", websocket_endpoint)
    app.add_api_websocket_route("/ws", websocket_endpoint)

    logger.info("FastAPI application initialized")
    return app


app = create_app()
