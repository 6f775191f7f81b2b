import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from message_types import (
    RECV_CANDIDATE,
    RECV_CONNECTED,
    RECV_KEEPALIVE,
    RECV_NEW_CONNECTION,
    RECV_UPDATE_NICKNAME,
)


class MessageKind(Enum):
    CANDIDATE = RECV_CANDIDATE
    NEW_CONNECTION = RECV_NEW_CONNECTION
    CONNECTED = RECV_CONNECTED
    UPDATE_NICKNAME = RECV_UPDATE_NICKNAME
    KEEPALIVE = RECV_KEEPALIVE
    UNRECOGNIZED = None


class InboundEnvelope(BaseModel):
    uid: str = Field(min_length=1)
    targetId: str = Field(min_length=1)
    type: str = Field(min_length=1)
    data: Optional[Dict[str, Any]] = None


class CandidatePayload(BaseModel):
    candidate: Any


class SessionDescriptionPayload(BaseModel):
    """Offer or answer; clients send both under `targetAddr`."""
    model_config = ConfigDict(populate_by_name=True)

    target_addr: Any = Field(alias="targetAddr")


class NicknamePayload(BaseModel):
    nickname: str


class EmptyPayload(BaseModel):
    pass


PAYLOAD_MODELS = {
    MessageKind.CANDIDATE: CandidatePayload,
    MessageKind.NEW_CONNECTION: SessionDescriptionPayload,
    MessageKind.CONNECTED: SessionDescriptionPayload,
    MessageKind.UPDATE_NICKNAME: NicknamePayload,
    MessageKind.KEEPALIVE: EmptyPayload,
}


@dataclass
class SignalMessage:
    kind: MessageKind
    uid: str
    target_id: str
    payload: Optional[BaseModel] = None


def decode_message(raw: Union[str, bytes]) -> Optional[SignalMessage]:
    """Parse and validate one inbound frame.

    Returns None for anything malformed: bad UTF-8, bad JSON, a missing
    envelope field or a payload without its required fields. Well-formed
    frames of an unknown type come back as MessageKind.UNRECOGNIZED.
    """
    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        envelope = InboundEnvelope.model_validate(json.loads(raw))
    except (UnicodeDecodeError, ValueError, RecursionError, ValidationError):
        return None

    try:
        kind = MessageKind(envelope.type)
    except ValueError:
        kind = MessageKind.UNRECOGNIZED

    if kind is MessageKind.UNRECOGNIZED:
        return SignalMessage(kind=kind, uid=envelope.uid, target_id=envelope.targetId)

    try:
        payload = PAYLOAD_MODELS[kind].model_validate(envelope.data or {})
    except ValidationError:
        return None
    return SignalMessage(kind=kind, uid=envelope.uid, target_id=envelope.targetId, payload=payload)
