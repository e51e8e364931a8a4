"""
Notification Service
Handles creation and management of user notifications
"""

from sqlalchemy.orm import Session
from typing import Dict, List, Optional
from datetime import datetime

from procurement.models.notification import Notification, NotificationType
from procurement.models.requisition import Requisition
from procurement.models.user import UserRole
from procurement.repositories.notification_repository import NotificationRepository
from procurement.repositories.user_repository import UserRepository
from procurement.utils.exceptions import NotFoundError
from procurement.utils.helpers import format_currency
from procurement.utils.logger import setup_logger

logger = setup_logger()


class NotificationService:
    """
    Service for managing notifications

    Notifications are added to the caller's session; they are committed
    together with the state change that caused them.
    """

    def notify_approval_required(self, db: Session, requisition: Requisition, step: Dict):
        """
        Notify every active user holding the pending step's role

        Args:
            db: Database session
            requisition: Requisition awaiting approval
            step: Pending approval step
        """
        target_role = UserRole(step["role"])
        approvers = UserRepository(db).list_active_by_role(target_role)

        if not approvers:
            logger.warning(
                f"No active {target_role.value} users found to notify for requisition {requisition.req_no}"
            )
            return

        repo = NotificationRepository(db)
        currency = requisition.items[0].currency if requisition.items else "IDR"
        for approver in approvers:
            repo.save(Notification(
                user_id=approver.id,
                type=NotificationType.APPROVAL_REQUIRED,
                title=f"Requisition {requisition.req_no} requires your approval",
                message=(
                    f"Requisition {requisition.req_no} from {requisition.department} "
                    f"({requisition.cost_center}) is waiting at step {step['order']} ({step['role']}). "
                    f"Total: {format_currency(requisition.total, currency)}."
                ),
                requisition_id=requisition.id
            ))

        logger.info(f"Notified {len(approvers)} {target_role.value} users for requisition {requisition.req_no}")

    def notify_requisition_approved(self, db: Session, requisition: Requisition, approver_name: str):
        """Notify the requester that the last approval step passed"""
        NotificationRepository(db).save(Notification(
            user_id=requisition.requester_id,
            type=NotificationType.REQUISITION_APPROVED,
            title="Requisition Approved",
            message=f"Your requisition {requisition.req_no} has been fully approved. Final approval by {approver_name}.",
            requisition_id=requisition.id
        ))
        logger.info(f"Notified user {requisition.requester_id} about requisition {requisition.req_no} approval")

    def notify_requisition_returned(
        self,
        db: Session,
        requisition: Requisition,
        approver_name: str,
        comment: Optional[str] = None
    ):
        """Notify the requester that the requisition went back to draft"""
        message = f"Your requisition {requisition.req_no} was returned by {approver_name}."
        if comment:
            message += f" Comment: {comment}"

        NotificationRepository(db).save(Notification(
            user_id=requisition.requester_id,
            type=NotificationType.REQUISITION_RETURNED,
            title="Requisition Returned",
            message=message,
            requisition_id=requisition.id
        ))
        logger.info(f"Notified user {requisition.requester_id} about requisition {requisition.req_no} return")

    def notify_po_created(self, db: Session, requisition: Requisition, po_no: str):
        """Notify the requester that a PO draft was raised from the requisition"""
        NotificationRepository(db).save(Notification(
            user_id=requisition.requester_id,
            type=NotificationType.PO_CREATED,
            title="Purchase Order Created",
            message=f"Purchase order {po_no} was created from your requisition {requisition.req_no}.",
            requisition_id=requisition.id
        ))

    def list_notifications(
        self,
        db: Session,
        user_id: int,
        unread_only: bool = False,
        skip: int = 0,
        limit: int = 50
    ) -> List[Notification]:
        return NotificationRepository(db).list_for_user(user_id, unread_only, skip, limit)

    def mark_as_read(self, db: Session, notification_id: int, user_id: int) -> Notification:
        """
        Mark one of the user's notifications as read

        Raises:
            NotFoundError: If the notification does not exist or belongs to someone else
        """
        repo = NotificationRepository(db)
        notification = repo.get(notification_id)
        if not notification or notification.user_id != user_id:
            raise NotFoundError("Notification not found")

        if not notification.is_read:
            notification.is_read = True
            notification.read_at = datetime.utcnow()
            repo.save(notification)
            repo.commit()

        return notification


# Create singleton instance
notification_service = NotificationService()
