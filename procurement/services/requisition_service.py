"""
Requisition Service
Business logic for the requisition lifecycle:
draft -> submitted -> approved, with returns back to draft
"""

from sqlalchemy.orm import Session
from typing import Dict, List, Optional, Tuple
from datetime import datetime

from procurement.config.settings import settings
from procurement.models.requisition import (
    Requisition,
    RequisitionItem,
    RequisitionStatus,
    TrailAction,
)
from procurement.models.user import User, UserRole
from procurement.repositories.approval_rule_repository import ApprovalRuleRepository
from procurement.repositories.requisition_repository import RequisitionRepository
from procurement.schemas.requisition import RequisitionCreate, RequisitionItemInput
from procurement.services.approval_engine import approval_engine
from procurement.services.budget_service import budget_service
from procurement.services.notification_service import notification_service
from procurement.utils.exceptions import (
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from procurement.utils.helpers import generate_document_number
from procurement.utils.logger import setup_logger, log_audit

logger = setup_logger()

APPROVAL_ACTIONS = (TrailAction.APPROVED.value, TrailAction.RETURNED.value)


class RequisitionService:
    """Service for requisition-related business logic"""

    def __init__(self):
        """Initialize with dependent services"""
        self.approval_engine = approval_engine
        self.budget_service = budget_service
        self.notification_service = notification_service

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_requisitions(self, db: Session, **filters) -> Tuple[List[Requisition], int]:
        return RequisitionRepository(db).search(**filters)

    def get_requisition(self, db: Session, requisition_id: int) -> Requisition:
        """
        Raises:
            NotFoundError: If the requisition does not exist
        """
        requisition = RequisitionRepository(db).get(requisition_id)
        if not requisition:
            raise NotFoundError("Requisition not found")
        return requisition

    def evaluate_approval_steps(self, db: Session, requisition: Requisition) -> List[Dict]:
        """
        Approval steps the requisition would get against the current rule set
        """
        rules = ApprovalRuleRepository(db).list()
        return self.approval_engine.evaluate(requisition, rules)

    def get_pending_approval_step(self, requisition: Requisition) -> Optional[Dict]:
        return self.approval_engine.get_pending_step(requisition)

    # ------------------------------------------------------------------
    # Draft editing
    # ------------------------------------------------------------------

    def create_requisition(self, db: Session, data: RequisitionCreate, requester: User) -> Requisition:
        """
        Create a draft requisition owned by the acting user

        Args:
            db: Database session
            data: Validated requisition form
            requester: Authenticated user, becomes the requester

        Returns:
            Requisition: The new draft
        """
        self._require_user(requester)
        self._require_items(data)

        repo = RequisitionRepository(db)
        req_no = generate_document_number(f"PR-{settings.DOCUMENT_YEAR}-", repo.all_numbers())

        now = datetime.utcnow()
        requisition = Requisition(
            req_no=req_no,
            requester_id=requester.id,
            department=data.department,
            cost_center=data.cost_center,
            needed_by=data.needed_by,
            notes=data.notes,
            status=RequisitionStatus.DRAFT,
            items=[self._build_item(item) for item in data.items],
            approval_steps=[],
            approval_trail=[],
            created_at=now,
            updated_at=now
        )
        requisition.total = requisition.calculate_total()

        repo.save(requisition)
        repo.commit()
        db.refresh(requisition)

        log_audit(requester.id, "create_requisition", f"{requisition.req_no} total={requisition.total}")
        logger.info(f"Requisition {requisition.req_no} created by user {requester.id}")
        return requisition

    def update_requisition(
        self,
        db: Session,
        requisition_id: int,
        data: RequisitionCreate,
        user: User
    ) -> Requisition:
        """
        Edit a draft requisition

        Recomputes the total and clears approval steps and trail, since items
        or cost center may have changed.

        Raises:
            NotFoundError, InvalidStateError, ForbiddenError, ValidationError
        """
        self._require_user(user)
        repo = RequisitionRepository(db)
        requisition = self.get_requisition(db, requisition_id)

        if requisition.status != RequisitionStatus.DRAFT:
            raise InvalidStateError("Only draft requisitions can be edited")
        if not self._is_owner_or_admin(requisition, user):
            raise ForbiddenError("Not allowed to edit this requisition")
        self._require_items(data)

        existing_items = {item.id: item for item in requisition.items}
        items = []
        for item_data in data.items:
            item = existing_items.get(item_data.id) if item_data.id else None
            if item is None:
                items.append(self._build_item(item_data))
                continue
            self._apply_item(item, item_data)
            items.append(item)

        requisition.department = data.department
        requisition.cost_center = data.cost_center
        requisition.needed_by = data.needed_by
        requisition.notes = data.notes
        requisition.items = items
        requisition.total = requisition.calculate_total()
        requisition.approval_steps = []
        requisition.approval_trail = []
        requisition.updated_at = datetime.utcnow()

        repo.save(requisition)
        repo.commit()
        db.refresh(requisition)

        log_audit(user.id, "edit_requisition", f"{requisition.req_no} total={requisition.total}")
        return requisition

    def delete_requisition(self, db: Session, requisition_id: int, user: User) -> str:
        """
        Remove a requisition (procurement admins only)

        Returns:
            str: Number of the deleted requisition
        """
        self._require_user(user)
        if user.role != UserRole.PROCUREMENT_ADMIN:
            raise ForbiddenError("Only procurement admins can delete requisitions")

        repo = RequisitionRepository(db)
        requisition = self.get_requisition(db, requisition_id)
        req_no = requisition.req_no
        repo.delete(requisition)
        repo.commit()

        log_audit(user.id, "delete_requisition", req_no)
        return req_no

    # ------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------

    def submit_requisition(self, db: Session, requisition_id: int, user: User) -> Requisition:
        """
        Submit a draft requisition for approval

        Runs the budget gate (excluding the requisition itself), assigns the
        approval steps from the current rule set and records the submission.

        Raises:
            NotFoundError: Unknown requisition
            InvalidStateError: Requisition is not a draft
            ForbiddenError: User is neither requester nor procurement admin
            BudgetExceededError: Total exceeds the cost center's remaining budget
        """
        self._require_user(user)
        repo = RequisitionRepository(db)
        requisition = self.get_requisition(db, requisition_id)

        if requisition.status != RequisitionStatus.DRAFT:
            raise InvalidStateError("Only draft requisitions can be submitted")
        if not self._is_owner_or_admin(requisition, user):
            raise ForbiddenError("Not allowed to submit this requisition")

        budget_check = self.budget_service.ensure_budget_available(
            db,
            requisition.cost_center,
            requisition.total,
            exclude_requisition_ids=[requisition.id]
        )

        steps = self.evaluate_approval_steps(db, requisition)

        now = datetime.utcnow()
        requisition.approval_steps = steps
        requisition.status = RequisitionStatus.SUBMITTED
        requisition.approval_trail = list(requisition.approval_trail or []) + [
            self._trail_entry(0, UserRole.EMPLOYEE.value, user.id, TrailAction.SUBMITTED.value, None, now)
        ]
        requisition.updated_at = now

        repo.save(requisition)
        self.notification_service.notify_approval_required(db, requisition, steps[0])
        repo.commit()
        db.refresh(requisition)

        details = f"{requisition.req_no} steps={[step['role'] for step in steps]}"
        if budget_check:
            details += f" remaining_after={budget_check['remaining_after']}"
        log_audit(user.id, "submit_requisition", details)
        logger.info(f"Requisition {requisition.req_no} submitted by user {user.id}")
        return requisition

    def process_approval(
        self,
        db: Session,
        requisition_id: int,
        user: User,
        action: str,
        comment: Optional[str] = None
    ) -> Requisition:
        """
        Approve or return the pending step of a submitted requisition

        Any user whose role equals the pending step's role may act. Approving
        the last pending step approves the requisition; returning sends it
        back to draft.

        Args:
            db: Database session
            requisition_id: Requisition id
            user: Acting user
            action: "approved" or "returned"
            comment: Optional comment stored in the trail

        Raises:
            NotFoundError, InvalidStateError, ForbiddenError, ValidationError
        """
        self._require_user(user)
        if action not in APPROVAL_ACTIONS:
            raise ValidationError(f"Unsupported approval action: {action}")

        repo = RequisitionRepository(db)
        requisition = self.get_requisition(db, requisition_id)

        if requisition.status != RequisitionStatus.SUBMITTED:
            raise InvalidStateError("Only submitted requisitions can be processed")

        pending_step = self.get_pending_approval_step(requisition)
        if not pending_step:
            raise InvalidStateError("No pending approval step")
        if not self.approval_engine.can_user_approve(user, requisition):
            raise ForbiddenError("You are not authorized for this step")

        now = datetime.utcnow()
        requisition.approval_trail = list(requisition.approval_trail or []) + [
            self._trail_entry(pending_step["order"], pending_step["role"], user.id, action, comment, now)
        ]
        requisition.updated_at = now

        if action == TrailAction.RETURNED.value:
            requisition.status = RequisitionStatus.DRAFT
            self.notification_service.notify_requisition_returned(db, requisition, user.full_name, comment)
        else:
            next_step = self.get_pending_approval_step(requisition)
            if next_step is None:
                requisition.status = RequisitionStatus.APPROVED
                self.notification_service.notify_requisition_approved(db, requisition, user.full_name)
            else:
                self.notification_service.notify_approval_required(db, requisition, next_step)

        repo.save(requisition)
        repo.commit()
        db.refresh(requisition)

        log_audit(
            user.id,
            f"{action}_requisition",
            f"{requisition.req_no} step={pending_step['order']} role={pending_step['role']} "
            f"status={requisition.status.value}"
        )
        logger.info(
            f"Requisition {requisition.req_no} {action} at step {pending_step['order']} "
            f"({pending_step['role']}) by user {user.id}. New status: {requisition.status.value}"
        )
        return requisition

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_user(self, user: Optional[User]):
        if user is None:
            raise UnauthorizedError("Unauthorized")

    def _require_items(self, data: RequisitionCreate):
        if not data.items:
            raise ValidationError("Add at least one line item")

    def _is_owner_or_admin(self, requisition: Requisition, user: User) -> bool:
        return requisition.requester_id == user.id or user.role == UserRole.PROCUREMENT_ADMIN

    def _build_item(self, data: RequisitionItemInput) -> RequisitionItem:
        item = RequisitionItem()
        self._apply_item(item, data)
        return item

    def _apply_item(self, item: RequisitionItem, data: RequisitionItemInput):
        item.sku = data.sku
        item.description = data.description
        item.quantity = data.quantity
        item.uom = data.uom
        item.unit_price = data.unit_price
        item.currency = data.currency.upper()
        item.category = data.category
        item.vendor_preference_id = data.vendor_preference_id

    def _trail_entry(
        self,
        step: int,
        role: str,
        user_id: int,
        action: str,
        comment: Optional[str],
        at: datetime
    ) -> Dict:
        return {
            "step": step,
            "role": role,
            "user_id": user_id,
            "action": action,
            "comment": comment,
            "at": at.isoformat()
        }


# Create singleton instance
requisition_service = RequisitionService()
