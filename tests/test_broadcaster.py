import asyncio

import pytest

from conftest import FakeSocket
from roomchat.services.broadcaster import Broadcaster
from roomchat.services.registry import ConnectionRegistry
from roomchat.services.rooms import Member, RoomDirectory


@pytest.fixture
def setup():
    registry = ConnectionRegistry()
    rooms = RoomDirectory()
    return registry, rooms, Broadcaster(rooms, registry)


@pytest.mark.asyncio
async def test_broadcast_reaches_every_member(setup):
    registry, rooms, broadcaster = setup
    a, b, outsider = FakeSocket(), FakeSocket(), FakeSocket()
    a_id, b_id = registry.register_connection(a), registry.register_connection(b)
    registry.register_connection(outsider)
    await rooms.join("r1", Member(a_id, "alice"))
    await rooms.join("r1", Member(b_id, "bob"))

    delivered = await broadcaster.broadcast_to_room("r1", "receive_message", {"room": "r1", "text": "hi"})

    assert delivered == 2
    for ws in (a, b):
        assert ws.sent == [{"event": "receive_message", "data": {"room": "r1", "text": "hi"}}]
    assert outsider.sent == []


@pytest.mark.asyncio
async def test_empty_or_unknown_room_is_noop(setup):
    registry, rooms, broadcaster = setup
    conn_id = registry.register_connection(FakeSocket())
    await rooms.join("r1", Member(conn_id, "alice"))
    await rooms.leave_all(conn_id)

    assert await broadcaster.broadcast_to_room("r1", "update_user_list", []) == 0
    assert await broadcaster.broadcast_to_room("never-created", "update_user_list", []) == 0


@pytest.mark.asyncio
async def test_gone_and_broken_connections_are_skipped(setup):
    registry, rooms, broadcaster = setup
    ok, broken = FakeSocket(), FakeSocket(broken=True)
    ok_id, broken_id = registry.register_connection(ok), registry.register_connection(broken)
    await rooms.join("r1", Member(ok_id, "alice"))
    await rooms.join("r1", Member(broken_id, "bob"))
    # still in the room but already gone from the registry
    await rooms.join("r1", Member("ghost", "carol"))

    delivered = await broadcaster.broadcast_to_room("r1", "receive_message", {"room": "r1"})

    assert delivered == 1
    assert len(ok.sent) == 1


class SlowSocket(FakeSocket):
    def __init__(self, gate: asyncio.Event):
        super().__init__()
        self.gate = gate

    async def send_json(self, data):
        await self.gate.wait()
        await super().send_json(data)


@pytest.mark.asyncio
async def test_slow_member_does_not_block_others_or_the_directory(setup):
    registry, rooms, broadcaster = setup
    gate = asyncio.Event()
    slow, fast = SlowSocket(gate), FakeSocket()
    slow_id, fast_id = registry.register_connection(slow), registry.register_connection(fast)
    await rooms.join("r1", Member(slow_id, "slow"))
    await rooms.join("r1", Member(fast_id, "fast"))

    task = asyncio.create_task(broadcaster.broadcast_to_room("r1", "receive_message", {"room": "r1"}))
    await asyncio.sleep(0.01)

    assert len(fast.sent) == 1
    assert not task.done()
    # directory lock was released before delivery
    await asyncio.wait_for(rooms.join("r2", Member(fast_id, "fast")), timeout=1)

    gate.set()
    assert await task == 2
