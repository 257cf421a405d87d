import logging
from typing import Any, Awaitable, Callable, Dict, Set
from roomchat.services.broadcaster import Broadcaster
from roomchat.services.registry import ConnectionRegistry, Transport
from roomchat.services.rooms import Member, RoomDirectory

log = logging.getLogger(__name__)

JOIN_ROOM = "join_room"
SEND_MESSAGE = "send_message"
DISCONNECT = "disconnect"
UPDATE_USER_LIST = "update_user_list"
RECEIVE_MESSAGE = "receive_message"

class GatewayError(Exception):
    """A client event that can't be handled. Reported to that client only."""

class SessionGateway:
    """Routes named client events to the room directory and broadcaster.

    Knows nothing about the transport beyond `send_json`; the websocket route
    (or a test) feeds it events.
    """

    def __init__(self, registry: ConnectionRegistry | None = None, directory: RoomDirectory | None = None):
        self.registry = registry if registry is not None else ConnectionRegistry()
        self.directory = directory if directory is not None else RoomDirectory()
        self.broadcaster = Broadcaster(self.directory, self.registry)
        self._identities: Dict[str, str] = {}
        self._closing: Set[str] = set()
        self._handlers: Dict[str, Callable[[str, Any], Awaitable[None]]] = {
            JOIN_ROOM: self.on_join_room,
            SEND_MESSAGE: self.on_send_message,
            DISCONNECT: self.on_disconnect,
        }

    def connect(self, transport: Transport, identity: str) -> str:
        conn_id = self.registry.register_connection(transport)
        self._identities[conn_id] = identity
        log.info("connected %s (%s)", conn_id, identity)
        return conn_id

    async def dispatch(self, conn_id: str, event: str, data: Any = None) -> None:
        handler = self._handlers.get(event)
        if handler is None:
            raise GatewayError(f"Unknown event: {event}")
        if event != DISCONNECT and (conn_id not in self.registry or conn_id in self._closing):
            raise GatewayError("Connection is closed")
        await handler(conn_id, data)

    async def on_join_room(self, conn_id: str, data: Any) -> None:
        if not isinstance(data, dict):
            raise GatewayError("join_room expects an object")
        room = data.get("room")
        if not isinstance(room, str) or not room:
            raise GatewayError("room required")
        username = data.get("username")
        if username is None:
            username = self._identities.get(conn_id, "")
        elif not isinstance(username, str):
            raise GatewayError("username must be a string")

        members = await self.directory.join(room, Member(id=conn_id, username=username))
        log.info("%s joined room %s", username, room)
        await self.broadcaster.broadcast_to_room(room, UPDATE_USER_LIST, [m.to_dict() for m in members])

    async def on_send_message(self, conn_id: str, data: Any) -> None:
        # no membership or content checks: existing clients post to rooms
        # they haven't joined
        if not isinstance(data, dict) or not isinstance(data.get("room"), str):
            raise GatewayError("send_message expects an object with a room")
        await self.broadcaster.broadcast_to_room(data["room"], RECEIVE_MESSAGE, data)

    async def on_disconnect(self, conn_id: str, data: Any = None) -> None:
        await self.disconnect(conn_id)

    async def disconnect(self, conn_id: str) -> None:
        if conn_id not in self.registry or conn_id in self._closing:
            return
        self._closing.add(conn_id)
        try:
            # rooms first; the connection only leaves the registry once no room lists it
            for room, members in await self.directory.leave_all(conn_id):
                await self.broadcaster.broadcast_to_room(room, UPDATE_USER_LIST, [m.to_dict() for m in members])
        finally:
            self.registry.remove_connection(conn_id)
            self._closing.discard(conn_id)
            identity = self._identities.pop(conn_id, None)
        log.info("disconnected %s (%s)", conn_id, identity)

gateway = SessionGateway()

def get_gateway() -> SessionGateway:
    return gateway
