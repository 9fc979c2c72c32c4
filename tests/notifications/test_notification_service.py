from __future__ import annotations

from dataclasses import replace

import pytest

from src.institute_system.institute_system.core.enums import Role
from src.institute_system.institute_system.core.exceptions import NotFoundError, ValidationError
from src.institute_system.institute_system.notifications.model import NewNotification, Notification
from src.institute_system.institute_system.notifications.mysql_notification_repository import table_for
from src.institute_system.institute_system.notifications.service import NotificationService


class InMemoryNotificationRepo:
    def __init__(self):
        self.rows: list[Notification] = []

    def create(self, notification):
        nid = len(self.rows) + 1
        self.rows.append(
            Notification(
                notification_id=nid,
                recipient_role=notification.recipient_role,
                recipient_id=notification.recipient_id,
                title=notification.title,
                message=notification.message,
                is_read=False,
                related_entity=notification.related_entity,
                entity_id=notification.entity_id,
            )
        )
        return nid

    def _mine(self, role, recipient_id):
        return [n for n in self.rows if n.recipient_role == role and n.recipient_id == recipient_id]

    def list_for(self, *, role, recipient_id, unread_only=False, limit=50):
        rows = [n for n in self._mine(role, recipient_id) if not (unread_only and n.is_read)]
        return rows[:limit]

    def unread_count(self, *, role, recipient_id):
        return sum(1 for n in self._mine(role, recipient_id) if not n.is_read)

    def _set_read(self, n):
        idx = self.rows.index(n)
        self.rows[idx] = replace(n, is_read=True)

    def mark_read(self, *, role, recipient_id, notification_id):
        for n in self._mine(role, recipient_id):
            if n.notification_id == notification_id:
                self._set_read(n)
                return True
        return False

    def mark_all_read(self, *, role, recipient_id):
        unread = [n for n in self._mine(role, recipient_id) if not n.is_read]
        for n in unread:
            self._set_read(n)
        return len(unread)


def _note(role, recipient_id, title="Hello"):
    return NewNotification(recipient_role=role, recipient_id=recipient_id, title=title, message="Body")


def test_each_role_has_its_own_table():
    assert table_for(Role.ADMIN).name == "admin_notifications"
    assert table_for(Role.TEACHER).name == "teacher_notifications"
    assert table_for(Role.STUDENT).name == "student_notifications"


def test_unknown_role_fails_instead_of_falling_through():
    with pytest.raises(ValueError):
        NotificationService(InMemoryNotificationRepo()).unread_count(role="guest", recipient_id=1)


def test_admin_notifications_are_broadcast():
    repo = InMemoryNotificationRepo()
    svc = NotificationService(repo)

    svc.notify(_note(Role.ADMIN, 99))

    assert repo.rows[0].recipient_id is None
    assert svc.unread_count(role=Role.ADMIN, recipient_id=None) == 1


def test_student_notifications_need_a_recipient():
    svc = NotificationService(InMemoryNotificationRepo())
    with pytest.raises(ValidationError):
        svc.notify(_note(Role.STUDENT, None))


def test_list_and_mark_read_are_scoped_to_recipient():
    repo = InMemoryNotificationRepo()
    svc = NotificationService(repo)
    mine = svc.notify(_note(Role.STUDENT, 5, "Mine"))
    theirs = svc.notify(_note(Role.STUDENT, 6, "Theirs"))

    assert [n.title for n in svc.list_for(role=Role.STUDENT, recipient_id=5)] == ["Mine"]

    with pytest.raises(NotFoundError):
        svc.mark_read(role=Role.STUDENT, recipient_id=5, notification_id=theirs)

    svc.mark_read(role=Role.STUDENT, recipient_id=5, notification_id=mine)
    assert svc.unread_count(role=Role.STUDENT, recipient_id=5) == 0
    assert svc.unread_count(role=Role.STUDENT, recipient_id=6) == 1


def test_mark_all_read_and_unread_filter():
    repo = InMemoryNotificationRepo()
    svc = NotificationService(repo)
    for i in range(3):
        svc.notify(_note(Role.TEACHER, 2, f"n{i}"))

    assert svc.mark_all_read(role=Role.TEACHER, recipient_id=2) == 3
    assert svc.list_for(role=Role.TEACHER, recipient_id=2, unread_only=True) == []
    assert len(svc.list_for(role=Role.TEACHER, recipient_id=2)) == 3
