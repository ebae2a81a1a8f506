import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Depends

from services.broadcast import ConnectionManager, get_broadcaster

router = APIRouter(tags=["realtime"])
logger = logging.getLogger(__name__)


@router.websocket("/ws")
async def push_channel(websocket: WebSocket, broadcaster: ConnectionManager = Depends(get_broadcaster)):
    """Push-only channel: anything the client sends is read and ignored."""
    await broadcaster.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect as e:
        logger.debug("Client %s disconnected with code %s", websocket.client, e.code)
    finally:
        broadcaster.disconnect(websocket)
