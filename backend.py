import asyncio
import random
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from constants import ID_MAX_ATTEMPTS
from logging_config import get_logger
from schemas.rooms import RosterEntry

logger = get_logger(__name__)


class IdGenerationError(Exception):
    """No free participant id could be found within the retry budget."""


@dataclass
class Participant:
    id: str
    connection: Any
    nickname: Optional[str] = None

    def to_roster_entry(self) -> dict:
        return RosterEntry(id=self.id, nickname=self.nickname).model_dump()


def generate_participant_id() -> str:
    """Two random digits followed by the current millisecond, e.g. "07342".

    Only unique enough to tell apart the handful of peers in one room; the
    registry retries on collision.
    """
    return f"{random.randrange(100):02d}{datetime.now().microsecond // 1000:03d}"


class ParticipantRegistry:
    """In-memory rooms: partition key -> participants in join order.

    Every read and write goes through one asyncio.Lock. Callers get copies,
    never the backing lists, and do their network sends after the lock is
    released.
    """

    def __init__(self, id_factory: Callable[[], str] = generate_participant_id, max_attempts: int = ID_MAX_ATTEMPTS):
        self._rooms: Dict[str, List[Participant]] = {}
        self._lock = asyncio.Lock()
        self._id_factory = id_factory
        self._max_attempts = max_attempts

    async def register(self, key: str, connection: Any, nickname: Optional[str] = None) -> Participant:
        async with self._lock:
            room = self._rooms.setdefault(key, [])
            taken = {participant.id for participant in room}
            for _ in range(self._max_attempts):
                candidate = self._id_factory()
                if candidate not in taken:
                    break
                logger.debug(f"Participant id {candidate} already taken in room {key}, retrying")
            else:
                if not room:
                    del self._rooms[key]
                logger.error(f"Could not generate a free participant id in room {key} after {self._max_attempts} attempts")
                raise IdGenerationError(f"no free participant id in room {key}")

            participant = Participant(id=candidate, connection=connection, nickname=nickname)
            room.append(participant)
            logger.debug(f"Registered participant {candidate} in room {key} ({len(room)} participants)")
            return replace(participant)

    async def unregister(self, key: str, participant_id: str) -> bool:
        async with self._lock:
            room = self._rooms.get(key)
            if not room:
                return False
            for index, participant in enumerate(room):
                if participant.id == participant_id:
                    del room[index]
                    break
            else:
                return False
            if not room:
                del self._rooms[key]
                logger.debug(f"Room {key} is empty, removed it")
            return True

    async def list_participants(self, key: str) -> List[Participant]:
        async with self._lock:
            return [replace(participant) for participant in self._rooms.get(key, [])]

    async def roster(self, key: str) -> List[dict]:
        async with self._lock:
            return [participant.to_roster_entry() for participant in self._rooms.get(key, [])]

    async def find(self, key: str, participant_id: str) -> Optional[Participant]:
        async with self._lock:
            participant = self._find(key, participant_id)
            return replace(participant) if participant else None

    async def update_nickname(self, key: str, participant_id: str, nickname: str) -> bool:
        async with self._lock:
            participant = self._find(key, participant_id)
            if participant is None:
                return False
            participant.nickname = nickname
            return True

    async def partition_keys(self) -> List[str]:
        async with self._lock:
            return list(self._rooms)

    async def count(self, key: str) -> int:
        async with self._lock:
            return len(self._rooms.get(key, []))

    def _find(self, key: str, participant_id: str) -> Optional[Participant]:
        for participant in self._rooms.get(key, []):
            if participant.id == participant_id:
                return participant
        return None


registry = ParticipantRegistry()
