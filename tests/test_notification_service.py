"""
Tests de las notificaciones de usuario
"""
from datetime import timedelta

import pytest

from conftest import NOW
from cocheras.exceptions import Forbidden, NotFound
from cocheras.models.notification import Notification
from cocheras.services import notification_service


@pytest.fixture
def notifications(db, renter):
    created = []
    for minutes in (0, 5, 10):
        created.append(
            notification_service.notify(
                db,
                user_id=renter.id,
                title=f"Aviso {minutes}",
                message="Mensaje de prueba",
                notification_type="sistema",
                clock=lambda minutes=minutes: NOW + timedelta(minutes=minutes),
            )
        )
    db.commit()
    return created


def test_notify_does_not_commit(db, renter, clock):
    notification_service.notify(
        db, renter.id, "Hola", "Mensaje", "sistema", clock=clock
    )
    db.rollback()

    assert db.query(Notification).count() == 0


def test_list_notifications_newest_first(db, renter, notifications):
    listed, unread_count = notification_service.list_notifications(db, renter.id)

    assert [n.title for n in listed] == ["Aviso 10", "Aviso 5", "Aviso 0"]
    assert unread_count == 3


def test_list_notifications_ties_broken_by_id(db, renter, clock):
    first = notification_service.notify(db, renter.id, "A", "m", "sistema", clock=clock)
    second = notification_service.notify(db, renter.id, "B", "m", "sistema", clock=clock)
    db.commit()

    listed, _ = notification_service.list_notifications(db, renter.id)

    assert [n.id for n in listed] == [second.id, first.id]


def test_mark_read(db, renter, notifications, clock):
    notification = notification_service.mark_read(
        db, notifications[0].id, renter.id, clock=clock
    )

    assert notification.is_read
    _, unread_count = notification_service.list_notifications(db, renter.id)
    assert unread_count == 2


def test_mark_read_missing(db, renter, clock):
    with pytest.raises(NotFound):
        notification_service.mark_read(db, 999, renter.id, clock=clock)


def test_mark_read_of_other_user(db, other_user, notifications, clock):
    with pytest.raises(Forbidden):
        notification_service.mark_read(db, notifications[0].id, other_user.id, clock=clock)


def test_mark_all_read_returns_count(db, renter, notifications, clock):
    notification_service.mark_read(db, notifications[0].id, renter.id, clock=clock)

    assert notification_service.mark_all_read(db, renter.id, clock=clock) == 2
    assert notification_service.mark_all_read(db, renter.id, clock=clock) == 0


def test_delete_notification(db, renter, notifications):
    notification_service.delete_notification(db, notifications[1].id, renter.id)

    listed, _ = notification_service.list_notifications(db, renter.id)
    assert len(listed) == 2


def test_delete_notification_of_other_user(db, other_user, notifications):
    with pytest.raises(Forbidden):
        notification_service.delete_notification(db, notifications[1].id, other_user.id)


def test_delete_missing_notification(db, renter):
    with pytest.raises(NotFound):
        notification_service.delete_notification(db, 999, renter.id)
