import asyncio
import logging
from typing import Any
from roomchat.services.registry import ConnectionRegistry
from roomchat.services.rooms import RoomDirectory

log = logging.getLogger(__name__)

class Broadcaster:
    def __init__(self, directory: RoomDirectory, registry: ConnectionRegistry):
        self.directory = directory
        self.registry = registry

    async def broadcast_to_room(self, room: str, event: str, payload: Any) -> int:
        """Best-effort fan-out of one event to the current members of `room`.

        The roster is snapshotted under the directory lock and delivery happens
        after it is released. Returns how many sends succeeded.
        """
        members = await self.directory.members_of(room)
        frame = {"event": event, "data": payload}
        conns = [(m.id, self.registry.get(m.id)) for m in members]
        sends = [self._send(conn_id, ws, frame) for conn_id, ws in conns if ws is not None]
        if not sends:
            return 0
        results = await asyncio.gather(*sends)
        return sum(results)

    async def _send(self, conn_id: str, ws, frame: dict) -> bool:
        try:
            await ws.send_json(frame)
        except Exception as e:
            log.debug("dropped %s for %s: %s", frame["event"], conn_id, e)
            return False
        return True
