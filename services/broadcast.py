import logging
from typing import Any, List

from fastapi import WebSocket

logger = logging.getLogger(__name__)

NEW_COMMENT = "newComment"
NEW_REPLY = "newReply"
NEW_CONTACT = "newContact"
NEW_VISIT = "newVisit"


class ConnectionManager:
    """Keeps the open push-channel sockets and fans events out to them.

    Delivery is fire-and-forget: there is no acknowledgment, no retry and no
    backlog for clients that connect later. A socket that fails a send is
    dropped from the set.
    """

    def __init__(self):
        self.active_connections: List[WebSocket] = []

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)
        logger.info("Client %s connected (%d online)", websocket.client, len(self.active_connections))

    def disconnect(self, websocket: WebSocket):
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)
        logger.info("Client %s left (%d online)", websocket.client, len(self.active_connections))

    async def broadcast(self, event: str, data: Any):
        message = {"event": event, "data": data}
        # iterate over a copy, failed sockets are removed while looping
        for websocket in list(self.active_connections):
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.warning("Dropping client %s after failed send of %s: %s", websocket.client, event, e)
                self.disconnect(websocket)


manager = ConnectionManager()

def get_broadcaster() -> ConnectionManager:
    return manager
