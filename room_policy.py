import json
from typing import Dict, Iterable, Optional

from pydantic import ValidationError

from logging_config import get_logger
from schemas.rooms import RoomPolicy

logger = get_logger(__name__)


class RoomPolicyTable:
    """Read-only mapping of room id -> RoomPolicy, loaded once at startup."""

    def __init__(self, policies: Iterable[RoomPolicy] = ()):
        self._policies: Dict[str, RoomPolicy] = {policy.room_id: policy for policy in policies}

    @classmethod
    def from_records(cls, records) -> "RoomPolicyTable":
        if not isinstance(records, list):
            logger.warning("Room policy source is not a JSON array, ignoring it")
            return cls()
        policies = []
        for index, record in enumerate(records):
            try:
                policies.append(RoomPolicy.model_validate(record))
            except ValidationError as e:
                logger.warning(f"Skipping invalid room policy record #{index}: {e.error_count()} error(s)")
        return cls(policies)

    @classmethod
    def from_file(cls, path: Optional[str]) -> "RoomPolicyTable":
        """Load the policy file; a missing or unreadable file yields an empty table."""
        if not path:
            return cls()
        try:
            with open(path, "r", encoding="utf-8") as f:
                records = json.load(f)
        except FileNotFoundError:
            logger.info(f"No room policy file at {path}, no room is password protected")
            return cls()
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read room policy file {path}: {e}")
            return cls()

        table = cls.from_records(records)
        logger.info(f"Loaded {len(table)} room policies, room IDs: {','.join(table.room_ids())}")
        return table

    def room_ids(self):
        return list(self._policies)

    def get(self, room_id: Optional[str]) -> Optional[RoomPolicy]:
        if not room_id:
            return None
        return self._policies.get(room_id)

    def granted_turns(self, room_id: Optional[str], password: Optional[str]) -> Optional[int]:
        """Relay hint for a connection, or None when the room has no policy or the password is wrong."""
        policy = self.get(room_id)
        if policy is None or not policy.password_matches(password):
            return None
        return policy.turns

    def __len__(self):
        return len(self._policies)
