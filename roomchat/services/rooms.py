import asyncio
from dataclasses import asdict, dataclass
from typing import Dict, List, Tuple

@dataclass(frozen=True)
class Member:
    id: str
    username: str

    def to_dict(self) -> dict:
        return asdict(self)

class RoomDirectory:
    """Room name -> members, guarded by a single lock.

    Every method returns copies; the underlying mapping never leaves this
    class. Rooms are created on first join and kept once empty.
    """

    def __init__(self):
        # dicts keep join order and give one entry per connection
        self._rooms: Dict[str, Dict[str, Member]] = {}
        self._lock = asyncio.Lock()

    async def join(self, room: str, member: Member) -> List[Member]:
        async with self._lock:
            members = self._rooms.setdefault(room, {})
            members[member.id] = member
            return list(members.values())

    async def leave_all(self, conn_id: str) -> List[Tuple[str, List[Member]]]:
        affected: List[Tuple[str, List[Member]]] = []
        async with self._lock:
            for room, members in self._rooms.items():
                if members.pop(conn_id, None) is not None:
                    affected.append((room, list(members.values())))
        return affected

    async def members_of(self, room: str) -> List[Member]:
        async with self._lock:
            return list(self._rooms.get(room, {}).values())

    async def rooms(self) -> List[str]:
        async with self._lock:
            return list(self._rooms)
