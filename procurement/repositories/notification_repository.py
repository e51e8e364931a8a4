"""
Notification Repository
"""

from typing import List

from procurement.models.notification import Notification
from procurement.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Notification persistence"""

    model = Notification

    def list_for_user(self, user_id: int, unread_only: bool = False, skip: int = 0, limit: int = 50) -> List[Notification]:
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.is_read == False)  # noqa: E712
        return query.order_by(Notification.created_at.desc()).offset(skip).limit(limit).all()
