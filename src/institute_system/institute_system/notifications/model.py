from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Notification:
    notification_id: int
    recipient_role: Role
    recipient_id: Optional[int]
    title: str
    message: str
    is_read: bool
    created_at: Optional[datetime] = None
    related_entity: Optional[str] = None
    entity_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "notification_id": self.notification_id,
            "title": self.title,
            "message": self.message,
            "is_read": self.is_read,
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M") if self.created_at else "",
            "related_entity": self.related_entity or "",
            "entity_id": self.entity_id,
        }


@dataclass(frozen=True)
class NewNotification:
    """A notification to insert.

    Admin notifications are broadcast (no recipient_id); teacher and student
    notifications are addressed to one teacher_id / student_id.
    """

    recipient_role: Role
    recipient_id: Optional[int]
    title: str
    message: str
    related_entity: Optional[str] = None
    entity_id: Optional[int] = None
