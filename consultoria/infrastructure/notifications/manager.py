"""Connection management helpers for notification websockets."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, DefaultDict, Set

from fastapi import WebSocket


def role_topic(role: str) -> str:
    """Return the broadcast topic name for ``role``."""

    return f"notifications/{role}"


class NotificationConnectionManager:
    """Manage active websocket connections grouped by user and by role topic."""

    def __init__(self) -> None:
        self._connections: DefaultDict[int, Set[WebSocket]] = defaultdict(set)
        self._topics: DefaultDict[str, Set[WebSocket]] = defaultdict(set)

    async def connect(self, user_id: int, role: str | None, websocket: WebSocket) -> None:
        """Accept the websocket and register it for ``user_id`` and the topic of ``role``."""

        await websocket.accept()
        self._connections[user_id].add(websocket)
        if role:
            self._topics[role_topic(role)].add(websocket)

    def disconnect(self, user_id: int, role: str | None, websocket: WebSocket) -> None:
        """Remove ``websocket`` from the pools of ``user_id`` and ``role``."""

        self._discard(self._connections, user_id, websocket)
        if role:
            self._discard(self._topics, role_topic(role), websocket)

    def has_subscribers(self) -> bool:
        return bool(self._connections) or bool(self._topics)

    async def send_to_user(self, user_id: int, message: dict[str, Any]) -> int:
        """Send ``message`` to every active connection for ``user_id``."""

        connections = list(self._connections.get(user_id, set()))
        return await self._send_all(connections, message)

    async def send_to_role(self, role: str, message: dict[str, Any]) -> int:
        """Send ``message`` to every connection subscribed to the topic of ``role``."""

        connections = list(self._topics.get(role_topic(role), set()))
        return await self._send_all(connections, message)

    async def _send_all(self, connections: list[WebSocket], message: dict[str, Any]) -> int:
        delivered = 0
        for connection in connections:
            try:
                await connection.send_json(message)
            except Exception:  # pragma: no cover - broken sockets are dropped
                self._forget(connection)
            else:
                delivered += 1
        return delivered

    def _forget(self, websocket: WebSocket) -> None:
        for user_id in list(self._connections):
            self._discard(self._connections, user_id, websocket)
        for topic in list(self._topics):
            self._discard(self._topics, topic, websocket)

    @staticmethod
    def _discard(pool: dict, key: Any, websocket: WebSocket) -> None:
        connections = pool.get(key)
        if connections is None:
            return
        connections.discard(websocket)
        if not connections:
            pool.pop(key, None)


notification_manager = NotificationConnectionManager()


__all__ = ["NotificationConnectionManager", "notification_manager", "role_topic"]
