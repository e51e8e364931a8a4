"""
Notification Schemas
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

from procurement.models.notification import NotificationType


class NotificationResponse(BaseModel):
    """Schema for notification response"""
    id: int
    type: NotificationType
    title: str
    message: str
    requisition_id: Optional[int] = None
    is_read: bool
    created_at: datetime
    read_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
