"""Connection manager for WebSocket sessions on the shared canvas."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from litestar import WebSocket

logger = structlog.get_logger(__name__)


@dataclass
class ConnectedClient:
    """Represents a client connected to the shared canvas."""

    websocket: WebSocket
    client_id: str = field(default_factory=lambda: uuid4().hex)
    connected_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "client_id": self.client_id,
            "connected_at": self.connected_at.isoformat(),
        }


class ConnectionManager:
    """Tracks every WebSocket subscribed to the canvas and fans messages out to them.

    There is a single shared canvas, so every connected client receives
    every broadcast.
    """

    def __init__(self) -> None:
        """Initialize the connection manager."""
        self._clients: dict[str, ConnectedClient] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> ConnectedClient:
        """Register a new WebSocket connection.

        Args:
            websocket: The accepted WebSocket connection.

        Returns:
            The ConnectedClient instance.
        """
        async with self._lock:
            client = ConnectedClient(websocket=websocket)
            self._clients[client.client_id] = client
            logger.info("Client connected", client_id=client.client_id, total_clients=len(self._clients))
            return client

    async def disconnect(self, client_id: str) -> None:
        """Remove a WebSocket connection.

        Args:
            client_id: The client's identifier.
        """
        async with self._lock:
            if self._clients.pop(client_id, None) is not None:
                logger.info("Client disconnected", client_id=client_id, remaining_clients=len(self._clients))

    async def get_clients(self) -> list[ConnectedClient]:
        """Get all connected clients."""
        async with self._lock:
            return list(self._clients.values())

    async def broadcast(self, message: dict[str, Any]) -> None:
        """Broadcast a message to every connected client.

        A client whose socket fails is logged and skipped; the others still
        receive the message.

        Args:
            message: The message to send.
        """
        clients = await self.get_clients()
        json_message = json.dumps(message)

        tasks = [self._send(client, json_message) for client in clients]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _send(self, client: ConnectedClient, message: str) -> None:
        try:
            await client.websocket.send_text(message)
        except Exception:
            logger.exception("Failed to send message", client_id=client.client_id)

    @property
    def total_connections(self) -> int:
        """Get the total number of connected clients."""
        return len(self._clients)
