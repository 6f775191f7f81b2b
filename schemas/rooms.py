from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class RoomPolicy(BaseModel):
    """One record of the room policy file: {"roomId": ..., "pwd": ..., "turns": ...}"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    room_id: str = Field(alias="roomId", min_length=1)
    password: str = Field(alias="pwd")
    turns: Optional[int] = None

    def password_matches(self, candidate: Optional[str]) -> bool:
        if not candidate:
            return False
        return self.password.lower() == candidate.lower()


class RosterEntry(BaseModel):
    id: str
    nickname: Optional[str] = None


class RegistrationAck(BaseModel):
    id: str
    roomId: Optional[str] = None
    turns: Optional[int] = None

    def to_payload(self) -> dict:
        payload = {"id": self.id, "roomId": self.roomId}
        # turns is only present when the room password was accepted
        if self.turns is not None:
            payload["turns"] = self.turns
        return payload
