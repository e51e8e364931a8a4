"""
Approval Routes
Approval inbox and approve/return actions
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from procurement.config.database import get_db
from procurement.services.auth_service import auth_service
from procurement.services.approval_inbox_service import approval_inbox_service
from procurement.services.requisition_service import requisition_service
from procurement.schemas.approval import ApprovalActionRequest, ApprovalInboxItem
from procurement.schemas.requisition import RequisitionResponse
from procurement.models.user import User
from procurement.utils.logger import setup_logger

logger = setup_logger()
router = APIRouter()


@router.get("")
async def get_pending_approvals(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """
    Requisitions waiting on the current user's role

    **Returns:**
    - approvals: requisition, its id and the pending step
    """
    approvals = approval_inbox_service.list_pending_approvals(db, current_user)
    logger.info(f"User {current_user.email} has {len(approvals)} pending approvals")
    return {
        "approvals": [
            ApprovalInboxItem(
                requisition_id=item["requisition_id"],
                requisition=RequisitionResponse.model_validate(item["requisition"]),
                current_step=item["current_step"]
            )
            for item in approvals
        ]
    }


@router.post("", response_model=RequisitionResponse)
async def process_approval(
    action_data: ApprovalActionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """
    Approve or return the pending step of a submitted requisition

    Only users whose role matches the pending step can act on it.
    """
    return requisition_service.process_approval(
        db,
        action_data.requisition_id,
        current_user,
        action_data.action,
        action_data.comment
    )
