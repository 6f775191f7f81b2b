from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from routers.static_files import static_router
from backend import IdGenerationError, registry
from connection import PeerConnection
from constants import ROOM_POLICY_FILE
from dispatcher import broadcast_roster, dispatch_message
from message_types import SEND_JOINED, SEND_REGISTERED
from room_key import parse_room_path, resolve_room_key
from room_policy import RoomPolicyTable
from schemas.rooms import RegistrationAck
from typing import Optional
from urllib.parse import unquote
from logging_config import get_logger, setup_logging
import os

# Setup logging
log_level = os.getenv("LOG_LEVEL", "INFO")
log_file = os.getenv("LOG_FILE", None)
setup_logging(log_level=log_level, log_file=log_file)
logger = get_logger(__name__)

app = FastAPI()

# Configure CORS to allow all origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Loaded once; never modified while the server runs
room_policies = RoomPolicyTable.from_file(ROOM_POLICY_FILE)

logger.info("FastAPI application initialized")


def read_nickname(websocket: WebSocket) -> Optional[str]:
    nickname = websocket.cookies.get("nickname")
    return unquote(nickname) if nickname else None


@app.websocket("/{full_path:path}")
async def websocket_endpoint(websocket: WebSocket, full_path: str = ""):
    """Signaling endpoint. The path is /{room_id}/{password}, both optional.

    A wrong or missing password does not reject the connection; it only
    withholds the room's relay hint (turns) from the registration ack.
    """
    client_host = websocket.client.host if websocket.client else ""
    room_id, password = parse_room_path(websocket.url.path)
    turns = room_policies.granted_turns(room_id, password)
    nickname = read_nickname(websocket)
    room_key = resolve_room_key(room_id, client_host)
    where = f"{client_host}/{room_id}" if room_id else client_host

    await websocket.accept()
    connection = PeerConnection(websocket).start()

    try:
        participant = await registry.register(room_key, connection, nickname)
    except IdGenerationError as e:
        logger.error(f"Registration failed for {where}: {e}")
        await connection.close(code=1011)
        return

    try:
        connection.send(SEND_REGISTERED, RegistrationAck(id=participant.id, roomId=room_id, turns=turns).to_payload())
        logger.info(f"User connected: {participant.id}@{where} ({await registry.count(room_key)} in room)")
        await broadcast_roster(registry, room_key)
        connection.send(SEND_JOINED, {"id": participant.id})

        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes")
            if raw is None:
                continue
            await dispatch_message(raw, participant, room_key, registry)
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error(f"WebSocket error for {participant.id}@{where}: {e}", exc_info=True)
    finally:
        await registry.unregister(room_key, participant.id)
        await broadcast_roster(registry, room_key)
        logger.info(f"User disconnected: {participant.id}@{where}")
        await connection.close()


app.include_router(static_router)
