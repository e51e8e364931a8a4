"""
Approval Inbox Service
"""

from sqlalchemy.orm import Session
from typing import Dict, List

from procurement.models.requisition import RequisitionStatus
from procurement.models.user import User
from procurement.repositories.requisition_repository import RequisitionRepository
from procurement.services.approval_engine import approval_engine


class ApprovalInboxService:
    """Submitted requisitions waiting on a user's role"""

    def list_pending_approvals(self, db: Session, user: User) -> List[Dict]:
        """
        Submitted requisitions whose pending step belongs to the user's role

        Returns:
            List of {"requisition_id", "requisition", "current_step"}
        """
        inbox = []
        for requisition in RequisitionRepository(db).list_by_status(RequisitionStatus.SUBMITTED):
            pending = approval_engine.get_pending_step(requisition)
            if not approval_engine.can_user_approve(user, requisition):
                continue
            inbox.append({
                "requisition_id": requisition.id,
                "requisition": requisition,
                "current_step": pending
            })
        return inbox


# Create singleton instance
approval_inbox_service = ApprovalInboxService()
