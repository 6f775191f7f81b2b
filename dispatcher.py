from typing import Union

from backend import Participant, ParticipantRegistry
from connection import broadcast
from logging_config import get_logger
from message_types import (
    SEND_CANDIDATE,
    SEND_CONNECTED,
    SEND_NEW_CONNECTION,
    SEND_NICKNAME_UPDATED,
    SEND_ROOM_INFO,
)
from schemas.signaling import MessageKind, SignalMessage, decode_message

logger = get_logger(__name__)

# kind -> (outbound type, outbound payload field, inbound payload attribute)
FORWARDS = {
    MessageKind.CANDIDATE: (SEND_CANDIDATE, "candidate", "candidate"),
    MessageKind.NEW_CONNECTION: (SEND_NEW_CONNECTION, "offer", "target_addr"),
    MessageKind.CONNECTED: (SEND_CONNECTED, "answer", "target_addr"),
}


async def broadcast_roster(registry: ParticipantRegistry, room_key: str) -> int:
    """Send the current roster of a room to everyone in it."""
    participants = await registry.list_participants(room_key)
    roster = [participant.to_roster_entry() for participant in participants]
    return broadcast((participant.connection for participant in participants), SEND_ROOM_INFO, roster)


async def dispatch_message(
    raw: Union[str, bytes],
    sender: Participant,
    room_key: str,
    registry: ParticipantRegistry,
) -> None:
    """Route one inbound frame from `sender`.

    Malformed frames, unknown kinds and references to participants that are
    not (or no longer) in the room are dropped without a reply.
    """
    message = decode_message(raw)
    if message is None:
        logger.debug(f"Dropping malformed message from {sender.id} in room {room_key}")
        return
    if message.uid != sender.id:
        logger.debug(f"Dropping message from {sender.id} claiming to be {message.uid} in room {room_key}")
        return

    if message.kind is MessageKind.KEEPALIVE:
        return
    if message.kind is MessageKind.UNRECOGNIZED:
        logger.debug(f"Ignoring unrecognized message kind from {sender.id} in room {room_key}")
        return
    if message.kind is MessageKind.UPDATE_NICKNAME:
        await _update_nickname(message, room_key, registry)
        return

    await _forward(message, room_key, registry)


async def _forward(message: SignalMessage, room_key: str, registry: ParticipantRegistry):
    me = await registry.find(room_key, message.uid)
    target = await registry.find(room_key, message.target_id)
    if me is None or target is None:
        logger.debug(f"Dropping {message.kind.name} from {message.uid} to unknown peer {message.target_id} in room {room_key}")
        return

    message_type, field, attribute = FORWARDS[message.kind]
    target.connection.send(message_type, {"targetId": message.uid, field: getattr(message.payload, attribute)})


async def _update_nickname(message: SignalMessage, room_key: str, registry: ParticipantRegistry):
    nickname = message.payload.nickname
    if not await registry.update_nickname(room_key, message.uid, nickname):
        return
    participants = await registry.list_participants(room_key)
    broadcast(
        (participant.connection for participant in participants),
        SEND_NICKNAME_UPDATED,
        {"id": message.uid, "nickname": nickname},
    )
