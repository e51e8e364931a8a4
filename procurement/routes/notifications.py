"""
Notification Routes
User notification management endpoints
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from procurement.config.database import get_db
from procurement.services.auth_service import auth_service
from procurement.services.notification_service import notification_service
from procurement.schemas.notification import NotificationResponse
from procurement.models.user import User
from procurement.utils.logger import setup_logger

logger = setup_logger()
router = APIRouter()


@router.get("")
async def get_my_notifications(
    unread_only: bool = False,
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """
    Get current user's notifications

    **Parameters:**
    - unread_only: If True, only return unread notifications
    - skip: Number of records to skip (pagination)
    - limit: Maximum number of records to return
    """
    notifications = notification_service.list_notifications(
        db, current_user.id, unread_only=unread_only, skip=skip, limit=limit
    )

    logger.info(f"User {current_user.email} fetched {len(notifications)} notifications")

    return {
        "success": True,
        "notifications": [NotificationResponse.model_validate(item) for item in notifications]
    }


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Mark one of the current user's notifications as read"""
    return notification_service.mark_as_read(db, notification_id, current_user.id)
