import asyncio
import time

from services.broadcast import ConnectionManager, manager


class FakeSocket:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []
        self.client = ("127.0.0.1", 5000)

    async def accept(self):
        pass

    async def send_json(self, data):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(data)


def test_broadcast_reaches_every_connected_client():
    connections = ConnectionManager()
    first, second = FakeSocket(), FakeSocket()

    async def scenario():
        await connections.connect(first)
        await connections.connect(second)
        await connections.broadcast("newContact", {"id": 1})

    asyncio.run(scenario())

    assert first.sent == [{"event": "newContact", "data": {"id": 1}}]
    assert second.sent == first.sent


def test_failed_client_is_dropped_without_affecting_others():
    connections = ConnectionManager()
    healthy, broken = FakeSocket(), FakeSocket(fail=True)

    async def scenario():
        await connections.connect(broken)
        await connections.connect(healthy)
        await connections.broadcast("newVisit", {"total": 1})
        await connections.broadcast("newVisit", {"total": 2})

    asyncio.run(scenario())

    assert connections.active_connections == [healthy]
    assert [m["data"]["total"] for m in healthy.sent] == [1, 2]


def test_broadcast_without_clients_is_a_no_op():
    asyncio.run(ConnectionManager().broadcast("newComment", {}))


def wait_for_connections(count, timeout=2.0):
    deadline = time.monotonic() + timeout
    while len(manager.active_connections) != count and time.monotonic() < deadline:
        time.sleep(0.01)
    assert len(manager.active_connections) == count


def test_new_comment_is_pushed_over_the_websocket(live_client):
    with live_client.websocket_connect("/ws") as websocket:
        wait_for_connections(1)

        response = live_client.post(
            "/api/comments",
            json={"user": "ana", "email": "ana@example.com", "message": "ao vivo"},
        )
        message = websocket.receive_json()

    assert response.status_code == 201
    assert message == {"event": "newComment", "data": response.json()["comment"]}
    wait_for_connections(0)
