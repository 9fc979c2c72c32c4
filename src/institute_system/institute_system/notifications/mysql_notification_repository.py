from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import NewNotification, Notification
from .repository import NotificationRepository


@dataclass(frozen=True)
class NotificationTable:
    name: str
    owner_column: Optional[str]


NOTIFICATION_TABLES: dict[Role, NotificationTable] = {
    Role.ADMIN: NotificationTable("admin_notifications", None),
    Role.TEACHER: NotificationTable("teacher_notifications", "teacher_id"),
    Role.STUDENT: NotificationTable("student_notifications", "student_id"),
}


def table_for(role: Role) -> NotificationTable:
    return NOTIFICATION_TABLES[Role(role)]


def _owner_filter(table: NotificationTable, recipient_id: Optional[int]) -> tuple[str, tuple]:
    if table.owner_column is None:
        return "1=1", ()
    return f"{table.owner_column}=%s", (int(recipient_id or 0),)


def insert_notification(cur, notification: NewNotification) -> int:
    """Insert using an open cursor so callers can share their transaction."""

    table = table_for(notification.recipient_role)
    if table.owner_column is None:
        cur.execute(
            f"""
            INSERT INTO {table.name}(title, message, entity_id, related_entity, is_read)
            VALUES(%s,%s,%s,%s,0)
            """,
            (notification.title, notification.message, notification.entity_id, notification.related_entity),
        )
    else:
        cur.execute(
            f"""
            INSERT INTO {table.name}({table.owner_column}, title, message, is_read)
            VALUES(%s,%s,%s,0)
            """,
            (int(notification.recipient_id or 0), notification.title, notification.message),
        )
    return int(cur.lastrowid)


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, notification: NewNotification) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_notification(cur, notification)

    def list_for(
        self,
        *,
        role: Role,
        recipient_id: Optional[int],
        unread_only: bool = False,
        limit: int = 50,
    ) -> Sequence[Notification]:
        table = table_for(role)
        owner_clause, params = _owner_filter(table, recipient_id)
        clauses = [owner_clause]
        if unread_only:
            clauses.append("is_read=0")
        where = " AND ".join(clauses)

        extra = ", entity_id, related_entity" if table.owner_column is None else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT notification_id, title, message, is_read, created_at{extra}
                FROM {table.name}
                WHERE {where}
                ORDER BY created_at DESC, notification_id DESC
                LIMIT %s
                """,
                params + (int(limit),),
            )
            return [
                Notification(
                    notification_id=int(r["notification_id"]),
                    recipient_role=Role(role),
                    recipient_id=recipient_id if table.owner_column else None,
                    title=r["title"],
                    message=r["message"],
                    is_read=bool(r["is_read"]),
                    created_at=r.get("created_at"),
                    related_entity=r.get("related_entity"),
                    entity_id=r.get("entity_id"),
                )
                for r in fetchall(cur)
            ]

    def unread_count(self, *, role: Role, recipient_id: Optional[int]) -> int:
        table = table_for(role)
        owner_clause, params = _owner_filter(table, recipient_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT COUNT(*) AS total FROM {table.name} WHERE {owner_clause} AND is_read=0",
                params,
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def mark_read(self, *, role: Role, recipient_id: Optional[int], notification_id: int) -> bool:
        table = table_for(role)
        owner_clause, params = _owner_filter(table, recipient_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE {table.name} SET is_read=1 WHERE notification_id=%s AND {owner_clause}",
                (int(notification_id),) + params,
            )
            return cur.rowcount > 0

    def mark_all_read(self, *, role: Role, recipient_id: Optional[int]) -> int:
        table = table_for(role)
        owner_clause, params = _owner_filter(table, recipient_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE {table.name} SET is_read=1 WHERE {owner_clause} AND is_read=0",
                params,
            )
            return int(cur.rowcount)
