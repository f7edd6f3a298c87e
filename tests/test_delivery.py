"""Tests for the realtime delivery channel."""

from __future__ import annotations

import asyncio
import logging
import threading
import time

import anyio
from anyio.from_thread import start_blocking_portal

from consultoria.domain.entities import Notification, RoleTarget, UserTarget
from consultoria.infrastructure.notifications import (
    NotificationConnectionManager,
    NotificationPublisher,
    role_topic,
    serialize_notification,
)


class FakeManager:
    def __init__(self, *, delay: float = 0.0) -> None:
        self.delay = delay
        self.sent: list[tuple[str, object, dict]] = []

    def has_subscribers(self) -> bool:
        return True

    async def send_to_user(self, user_id, message):
        await anyio.sleep(self.delay)
        self.sent.append(("user", user_id, message))
        return 1

    async def send_to_role(self, role, message):
        await anyio.sleep(self.delay)
        self.sent.append(("role", role, message))
        return 1


class FakeSocket:
    def __init__(self) -> None:
        self.accepted = False
        self.messages: list[dict] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message) -> None:
        self.messages.append(message)


class ClosedSocket(FakeSocket):
    async def send_json(self, message) -> None:
        raise RuntimeError("socket closed")


def _notification(target) -> Notification:
    return Notification(
        id=1, target=target, event_type="GENERAL", title="Aviso", message="Hola"
    )


def test_push_inside_event_loop_routes_by_target():
    manager = FakeManager()
    publisher = NotificationPublisher(manager, timeout=1.0)

    async def scenario():
        publisher.push(_notification(UserTarget(7)))
        publisher.push(_notification(RoleTarget("admin")))
        await anyio.sleep(0.05)

    anyio.run(scenario)

    assert [(kind, key) for kind, key, _ in manager.sent] == [("user", 7), ("role", "admin")]
    assert manager.sent[0][2]["type"] == "notification"
    assert manager.sent[0][2]["data"]["id"] == 1


def test_push_from_plain_thread_without_app_loop_is_dropped(caplog):
    manager = FakeManager()
    publisher = NotificationPublisher(manager, timeout=1.0)

    with caplog.at_level(logging.WARNING):
        publisher.push(_notification(UserTarget(7)))

    assert manager.sent == []
    assert "Realtime push skipped" in caplog.text


def _wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_push_from_plain_thread_uses_the_app_loop():
    manager = NotificationConnectionManager()
    publisher = NotificationPublisher(manager, timeout=1.0)
    admin_socket = FakeSocket()
    notification = Notification(
        id=1,
        target=RoleTarget("admin"),
        event_type="DAILY_STATS",
        title="Estadísticas Diarias del Sistema",
        message="Resumen",
    )

    with start_blocking_portal() as portal:
        portal.call(manager.connect, 1, "admin", admin_socket)
        publisher.bind_loop(portal.call(asyncio.get_running_loop))

        worker = threading.Thread(target=publisher.push, args=(notification,))
        worker.start()
        worker.join()

        assert _wait_for(lambda: len(admin_socket.messages) == 1)
        publisher.unbind_loop()

    message = admin_socket.messages[0]
    assert message["type"] == "notification"
    assert message["data"]["type"] == "DAILY_STATS"
    assert message["data"]["target_role"] == "admin"


def test_push_after_app_loop_stops_is_dropped(caplog):
    manager = FakeManager()
    publisher = NotificationPublisher(manager, timeout=1.0)

    with start_blocking_portal() as portal:
        publisher.bind_loop(portal.call(asyncio.get_running_loop))

    with caplog.at_level(logging.WARNING):
        publisher.push(_notification(UserTarget(7)))

    assert manager.sent == []
    assert "Realtime push skipped" in caplog.text


def test_slow_delivery_is_abandoned_after_timeout(caplog):
    manager = FakeManager(delay=1.0)
    publisher = NotificationPublisher(manager, timeout=0.01)

    async def scenario():
        publisher.push(_notification(UserTarget(7)))
        await anyio.sleep(0.1)

    with caplog.at_level(logging.WARNING):
        anyio.run(scenario)

    assert manager.sent == []
    assert "abandoned" in caplog.text


def test_push_without_subscribers_does_nothing():
    publisher = NotificationPublisher(NotificationConnectionManager(), timeout=1.0)

    publisher.push(_notification(UserTarget(7)))


def test_connection_manager_delivers_to_users_and_role_topics():
    manager = NotificationConnectionManager()
    admin_socket, user_socket = FakeSocket(), FakeSocket()

    async def scenario():
        await manager.connect(1, "admin", admin_socket)
        await manager.connect(7, "user", user_socket)
        delivered_role = await manager.send_to_role("admin", {"type": "ping"})
        delivered_user = await manager.send_to_user(7, {"type": "ping"})
        delivered_nobody = await manager.send_to_user(99, {"type": "ping"})
        return delivered_role, delivered_user, delivered_nobody

    assert anyio.run(scenario) == (1, 1, 0)
    assert admin_socket.accepted and user_socket.accepted
    assert len(admin_socket.messages) == 1
    assert len(user_socket.messages) == 1

    manager.disconnect(1, "admin", admin_socket)
    manager.disconnect(7, "user", user_socket)
    assert manager.has_subscribers() is False


def test_connection_manager_forgets_broken_sockets():
    manager = NotificationConnectionManager()
    socket = ClosedSocket()

    async def scenario():
        await manager.connect(7, "user", socket)
        return await manager.send_to_user(7, {"type": "ping"})

    assert anyio.run(scenario) == 0
    assert manager.has_subscribers() is False


def test_role_topic_naming():
    assert role_topic("admin") == "notifications/admin"


def test_serialize_notification_exposes_wire_names():
    payload = serialize_notification(_notification(RoleTarget("user")))

    assert payload["type"] == "GENERAL"
    assert payload["target_role"] == "user"
    assert payload["target_user_id"] is None
    assert payload["read"] is False
    assert payload["created_at"] is None
