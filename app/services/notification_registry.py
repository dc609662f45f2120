"""
Registry of live notification connections with best-effort broadcast
"""
import asyncio
import json
import logging
from typing import Any, Dict, Set

from starlette.websockets import WebSocketState

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """
    Process-wide set of open notification connections
    
    Delivery is at-most-once and fire-and-forget:
    - Only connections whose transport is open receive an event
    - Nothing is queued or replayed for late or reconnecting clients
    - A failing connection never blocks delivery to the others
    
    Every connected client receives every event, whatever its role.
    """
    
    def __init__(self):
        self._connections: Set[Any] = set()
    
    def add(self, connection: Any) -> None:
        self._connections.add(connection)
        logger.info(f"Notification connection added ({len(self._connections)} live)")
    
    def remove(self, connection: Any) -> None:
        self._connections.discard(connection)
        logger.info(f"Notification connection removed ({len(self._connections)} live)")
    
    def __len__(self) -> int:
        return len(self._connections)
    
    def __contains__(self, connection: Any) -> bool:
        return connection in self._connections
    
    async def broadcast(self, event: Dict[str, Any]) -> int:
        """
        Send one event to every open connection
        
        Args:
            event: JSON-serializable payload
            
        Returns:
            Number of connections the event was delivered to
        """
        message = json.dumps(event)
        targets = [conn for conn in list(self._connections) if self._is_open(conn)]
        
        if not targets:
            logger.info(f"Broadcast {event.get('type')} skipped: no open connections")
            return 0
        
        outcomes = await asyncio.gather(
            *(conn.send_text(message) for conn in targets),
            return_exceptions=True
        )
        
        delivered = 0
        for conn, outcome in zip(targets, outcomes):
            if isinstance(outcome, Exception):
                logger.warning(f"Broadcast to a connection failed: {outcome!r}")
            else:
                delivered += 1
        
        logger.info(f"Broadcast {event.get('type')} delivered to {delivered}/{len(targets)} connections")
        return delivered
    
    async def close_all(self) -> None:
        """Close every connection; used at shutdown"""
        connections = list(self._connections)
        self._connections.clear()
        
        for conn in connections:
            if not self._is_open(conn):
                continue
            try:
                await conn.close(code=1001)
            except Exception as e:
                logger.warning(f"Closing notification connection failed: {e!r}")
        
        logger.info(f"Closed {len(connections)} notification connections")
    
    @staticmethod
    def _is_open(connection: Any) -> bool:
        return (
            connection.client_state == WebSocketState.CONNECTED
            and connection.application_state == WebSocketState.CONNECTED
        )
