import uuid
from typing import Any, Dict, Protocol

class Transport(Protocol):
    async def send_json(self, data: Any) -> None: ...

class ConnectionRegistry:
    """Live connections by id. Not room-scoped."""

    def __init__(self):
        self._conns: Dict[str, Transport] = {}

    def register_connection(self, transport: Transport) -> str:
        conn_id = uuid.uuid4().hex
        self._conns[conn_id] = transport
        return conn_id

    def remove_connection(self, conn_id: str) -> bool:
        # True only for the call that actually removed it
        return self._conns.pop(conn_id, None) is not None

    def get(self, conn_id: str) -> Transport | None:
        return self._conns.get(conn_id)

    def __contains__(self, conn_id: object) -> bool:
        return conn_id in self._conns

    def __len__(self) -> int:
        return len(self._conns)
