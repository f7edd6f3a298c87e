"""Tests for the notification router and its visibility rule."""

from __future__ import annotations

import pytest

from consultoria.application.use_cases.notifications import NotificationRouter
from consultoria.domain.entities import (
    Notification,
    RoleTarget,
    UserTarget,
    build_target,
)
from consultoria.domain.exceptions import (
    NotificationNotFoundError,
    NotificationValidationError,
)
from consultoria.infrastructure.models import NotificationModel


class RecordingChannel:
    def __init__(self) -> None:
        self.pushed: list[Notification] = []

    def push(self, notification: Notification) -> None:
        self.pushed.append(notification)


class FailingChannel:
    def push(self, notification: Notification) -> None:
        raise RuntimeError("socket layer is down")


@pytest.fixture()
def router(db_session) -> NotificationRouter:
    return NotificationRouter(db_session)


def _create(router: NotificationRouter, target, /, **overrides) -> Notification:
    values = {
        "event_type": "GENERAL",
        "title": "Aviso",
        "message": "Contenido del aviso",
        "target": target,
    }
    values.update(overrides)
    return router.create(**values)


def test_role_broadcast_is_visible_to_every_member_of_the_role(router):
    broadcast = _create(router, RoleTarget("user"))

    for user_id in (7, 8):
        page = router.list(user_id, "user")
        assert [item.id for item in page.items] == [broadcast.id]

    assert router.list(1, "admin").items == []


def test_private_notification_is_only_visible_to_its_user(router):
    private = _create(router, UserTarget(7))

    assert [item.id for item in router.list(7, "user").items] == [private.id]
    assert router.list(8, "user").items == []
    assert router.list(8, "admin").items == []


def test_private_notification_ignores_the_reader_role(router):
    private = _create(router, UserTarget(7))

    assert [item.id for item in router.list(7, "admin").items] == [private.id]


def test_user_target_wins_when_both_addressing_fields_are_given(router):
    created = _create(router, build_target(7, "admin"))

    assert created.target == UserTarget(7)
    assert created.target_role is None
    assert router.list(1, "admin").items == []


def test_list_is_newest_first_and_paginated(router):
    created = [_create(router, UserTarget(7), title=f"Aviso {index}") for index in range(5)]

    first_page = router.list(7, "user", page=0, size=2)
    second_page = router.list(7, "user", page=1, size=2)
    last_page = router.list(7, "user", page=2, size=2)

    assert [item.id for item in first_page.items] == [created[4].id, created[3].id]
    assert [item.id for item in second_page.items] == [created[2].id, created[1].id]
    assert [item.id for item in last_page.items] == [created[0].id]
    assert first_page.total == 5
    assert first_page.total_pages == 3


@pytest.mark.parametrize(
    ("page", "size"),
    [(-1, 20), (0, 0), (0, 101)],
)
def test_list_rejects_invalid_paging(router, page, size):
    with pytest.raises(NotificationValidationError):
        router.list(7, "user", page=page, size=size)


def test_create_assigns_defaults(router):
    created = _create(router, UserTarget(7))

    assert created.id is not None
    assert created.read is False
    assert created.priority == "medium"
    assert created.created_at is not None
    assert created.created_at.tzinfo is not None


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": "   "},
        {"title": None},
        {"message": ""},
        {"priority": "urgent"},
        {"target": None},
    ],
)
def test_invalid_notifications_are_rejected_and_not_persisted(router, db_session, overrides):
    with pytest.raises(NotificationValidationError):
        _create(router, UserTarget(7), **overrides)

    assert db_session.query(NotificationModel).count() == 0


def test_blank_role_target_cannot_be_built():
    with pytest.raises(NotificationValidationError):
        RoleTarget("  ")
    with pytest.raises(NotificationValidationError):
        build_target(None, None)


def test_priority_is_normalized(router):
    created = _create(router, UserTarget(7), priority="HIGH")

    assert created.priority == "high"


def test_mark_read_is_idempotent(router):
    created = _create(router, UserTarget(7))

    router.mark_read(created.id)
    router.mark_read(created.id)

    assert router.get(created.id).read is True
    assert router.stats(7, "user").unread == 0


def test_mark_read_unknown_id_raises_not_found(router):
    with pytest.raises(NotificationNotFoundError) as excinfo:
        router.mark_read(999)

    assert excinfo.value.notification_id == 999


def test_mark_all_read_only_touches_visible_notifications(router):
    _create(router, UserTarget(7))
    _create(router, RoleTarget("user"))
    other = _create(router, UserTarget(8))
    admin_only = _create(router, RoleTarget("admin"))

    updated = router.mark_all_read(7, "user")

    assert updated == 2
    assert router.stats(7, "user").unread == 0
    assert router.stats(7, "user").total == 2
    assert router.get(other.id).read is False
    assert router.get(admin_only.id).read is False


def test_mark_many_read_skips_ids_the_caller_cannot_see(router):
    mine = _create(router, UserTarget(7))
    theirs = _create(router, UserTarget(8))

    updated = router.mark_many_read([mine.id, theirs.id, 12345], 7, "user")

    assert updated == 1
    assert router.get(mine.id).read is True
    assert router.get(theirs.id).read is False


def test_stats_counts_unread_and_total(router):
    first = _create(router, UserTarget(7))
    _create(router, UserTarget(7))
    _create(router, RoleTarget("user"))

    router.mark_read(first.id)
    stats = router.stats(7, "user")

    assert stats.total == 3
    assert stats.unread == 2


def test_delete_removes_notification_from_listing(router):
    created = _create(router, UserTarget(7))

    router.delete(created.id)

    assert router.list(7, "user").items == []
    with pytest.raises(NotificationNotFoundError):
        router.delete(created.id)


def test_delete_for_role_only_removes_that_role(router):
    _create(router, RoleTarget("admin"))
    _create(router, RoleTarget("admin"))
    kept = _create(router, RoleTarget("user"))

    assert router.delete_for_role("admin") == 2
    assert router.list_for_role("admin").total == 0
    assert [item.id for item in router.list_for_role("user").items] == [kept.id]


def test_create_pushes_to_the_delivery_channel(db_session):
    channel = RecordingChannel()
    router = NotificationRouter(db_session, delivery=channel)

    created = _create(router, UserTarget(7))

    assert [item.id for item in channel.pushed] == [created.id]


def test_failing_delivery_does_not_break_creation(db_session):
    router = NotificationRouter(db_session, delivery=FailingChannel())

    created = _create(router, UserTarget(7))

    assert created.id is not None
    assert [item.id for item in router.list(7, "user").items] == [created.id]


def test_metadata_and_related_entity_are_persisted(router):
    created = _create(
        router,
        UserTarget(7),
        related_entity_id=42,
        related_entity_type="BUDGET",
        metadata='{"source": "web"}',
    )

    stored = router.get(created.id)
    assert stored.related_entity_id == 42
    assert stored.related_entity_type == "BUDGET"
    assert stored.metadata == '{"source": "web"}'
