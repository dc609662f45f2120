"""
Real-time notification channel (WebSocket)
"""
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from fastapi.requests import HTTPConnection
import logging

from app.services.notification_registry import ConnectionRegistry

router = APIRouter(tags=["notifications"])
logger = logging.getLogger(__name__)


def get_registry(connection: HTTPConnection) -> ConnectionRegistry:
    """Registry created with the application, for HTTP and WebSocket routes alike"""
    return connection.app.state.notification_registry


@router.websocket("/ws")
async def notification_socket(
    websocket: WebSocket,
    registry: ConnectionRegistry = Depends(get_registry)
):
    """
    Subscribe to new-quiz notifications
    
    - Server-to-client only; inbound messages are ignored
    - Events published while disconnected are never replayed
    """
    # Registered before the handshake completes; broadcasts skip it until open
    registry.add(websocket)
    try:
        await websocket.accept()
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect as e:
        logger.debug(f"Notification client disconnected: code={e.code}")
    finally:
        registry.remove(websocket)
