from __future__ import annotations

from typing import Optional, Sequence

from ..common.app_logger import get_logger
from ..common.validators import require_non_empty, require_positive_id
from ..core.constants import DEFAULT_NOTIFICATION_LIMIT
from ..core.enums import Role
from ..core.exceptions import NotFoundError
from .model import NewNotification, Notification
from .repository import NotificationRepository

logger = get_logger("notifications")


class NotificationService:
    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    @staticmethod
    def _recipient(role: Role, recipient_id: Optional[int]) -> Optional[int]:
        role = Role(role)
        if role == Role.ADMIN:
            return None
        return require_positive_id(recipient_id, f"{role.value.capitalize()} id")

    def notify(self, notification: NewNotification) -> int:
        """Insert a stand-alone notification, e.g. an admin notice to a teacher.

        Approval decisions write their notification inside the decision
        transaction instead (see insert_notification).
        """

        recipient_id = self._recipient(notification.recipient_role, notification.recipient_id)
        notification_id = self._notifications.create(
            NewNotification(
                recipient_role=Role(notification.recipient_role),
                recipient_id=recipient_id,
                title=require_non_empty(notification.title, "Title"),
                message=require_non_empty(notification.message, "Message"),
                related_entity=notification.related_entity,
                entity_id=notification.entity_id,
            )
        )
        logger.info("notification %s sent to %s %s", notification_id, Role(notification.recipient_role).value, recipient_id)
        return notification_id

    def list_for(
        self,
        *,
        role: Role,
        recipient_id: Optional[int],
        unread_only: bool = False,
        limit: int = DEFAULT_NOTIFICATION_LIMIT,
    ) -> Sequence[Notification]:
        return self._notifications.list_for(
            role=Role(role),
            recipient_id=self._recipient(role, recipient_id),
            unread_only=unread_only,
            limit=max(1, int(limit)),
        )

    def unread_count(self, *, role: Role, recipient_id: Optional[int]) -> int:
        return self._notifications.unread_count(role=Role(role), recipient_id=self._recipient(role, recipient_id))

    def mark_read(self, *, role: Role, recipient_id: Optional[int], notification_id: int) -> None:
        ok = self._notifications.mark_read(
            role=Role(role),
            recipient_id=self._recipient(role, recipient_id),
            notification_id=require_positive_id(notification_id, "Notification"),
        )
        if not ok:
            raise NotFoundError("Notification not found")

    def mark_all_read(self, *, role: Role, recipient_id: Optional[int]) -> int:
        return self._notifications.mark_all_read(role=Role(role), recipient_id=self._recipient(role, recipient_id))
