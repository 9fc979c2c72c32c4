from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import NewNotification, Notification


class NotificationRepository(Protocol):
    def create(self, notification: NewNotification) -> int:
        raise NotImplementedError

    def list_for(
        self,
        *,
        role: Role,
        recipient_id: Optional[int],
        unread_only: bool = False,
        limit: int = 50,
    ) -> Sequence[Notification]:
        raise NotImplementedError

    def unread_count(self, *, role: Role, recipient_id: Optional[int]) -> int:
        raise NotImplementedError

    def mark_read(self, *, role: Role, recipient_id: Optional[int], notification_id: int) -> bool:
        raise NotImplementedError

    def mark_all_read(self, *, role: Role, recipient_id: Optional[int]) -> int:
        raise NotImplementedError
