"""
Budget Service
Committed spend per cost center and the budget gate for new commitments
"""

from sqlalchemy.orm import Session
from typing import Any, Dict, Iterable, List, Optional

from procurement.models.budget import Budget
from procurement.models.purchase_order import POStatus
from procurement.models.requisition import RequisitionStatus
from procurement.repositories.budget_repository import BudgetRepository
from procurement.repositories.purchase_order_repository import PurchaseOrderRepository
from procurement.repositories.requisition_repository import RequisitionRepository
from procurement.utils.exceptions import BudgetExceededError, NotFoundError
from procurement.utils.helpers import format_currency
from procurement.utils.logger import setup_logger

logger = setup_logger()

ACTIVE_REQUISITION_STATUSES = {RequisitionStatus.SUBMITTED, RequisitionStatus.APPROVED}
ACTIVE_PO_STATUSES = {
    POStatus.DRAFT,
    POStatus.IN_PROGRESS,
    POStatus.ISSUED,
    POStatus.PARTIALLY_RECEIVED,
    POStatus.CLOSED,
}


class BudgetService:
    """Service for budget usage and enforcement"""

    def list_budgets(self, db: Session) -> List[Budget]:
        return BudgetRepository(db).list()

    def get_budget_by_cost_center(self, db: Session, cost_center: str) -> Optional[Budget]:
        return BudgetRepository(db).get_by_cost_center(cost_center)

    def calculate_budget_usage(
        self,
        db: Session,
        cost_center: str,
        exclude_requisition_ids: Optional[Iterable[int]] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Calculate committed spend against a cost center's budget

        Usage counts submitted/approved requisitions of the cost center and
        every active PO linked to a requisition of the cost center.

        Args:
            db: Database session
            cost_center: Cost center code
            exclude_requisition_ids: Requisitions left out of the requisition
                commitment (the one being submitted)

        Returns:
            {"budget", "usage", "remaining"}, or None when the cost center
            has no budget
        """
        budget = BudgetRepository(db).get_by_cost_center(cost_center)
        if not budget:
            return None

        excluded = set(exclude_requisition_ids or [])
        requisition_repo = RequisitionRepository(db)

        requisition_commitment = sum(
            requisition.total
            for requisition in requisition_repo.list_by_cost_center(
                cost_center, ACTIVE_REQUISITION_STATUSES
            )
            if requisition.id not in excluded
        )

        po_commitment = 0.0
        active_pos = PurchaseOrderRepository(db).list_by_status(ACTIVE_PO_STATUSES)
        linked_ids = {
            requisition_id
            for po in active_pos
            for requisition_id in po.linked_requisition_ids or []
        }
        cost_center_by_requisition = {
            requisition.id: requisition.cost_center
            for requisition in requisition_repo.get_many(linked_ids)
        }
        for po in active_pos:
            if any(
                cost_center_by_requisition.get(requisition_id) == cost_center
                for requisition_id in po.linked_requisition_ids or []
            ):
                po_commitment += po.total

        usage = requisition_commitment + po_commitment

        return {
            "budget": budget,
            "usage": usage,
            "remaining": budget.amount - usage
        }

    def ensure_budget_available(
        self,
        db: Session,
        cost_center: str,
        amount: float,
        exclude_requisition_ids: Optional[Iterable[int]] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Check that a new commitment fits in the remaining budget

        Cost centers without a budget are not enforced.

        Returns:
            {"budget", "usage", "remaining", "remaining_after"}, or None when
            the cost center has no budget

        Raises:
            BudgetExceededError: If amount exceeds the remaining budget
        """
        summary = self.calculate_budget_usage(db, cost_center, exclude_requisition_ids)
        if summary is None:
            logger.debug(f"No budget configured for cost center {cost_center}, skipping budget check")
            return None

        budget = summary["budget"]
        if amount > summary["remaining"]:
            remaining_formatted = format_currency(max(summary["remaining"], 0), budget.currency)
            amount_formatted = format_currency(amount, budget.currency)
            message = (
                f"Budget {budget.name} ({budget.cost_center}) exceeded. "
                f"Remaining {remaining_formatted}, requested {amount_formatted}."
            )
            logger.warning(message)
            raise BudgetExceededError(message)

        return {
            **summary,
            "remaining_after": summary["remaining"] - amount
        }

    def get_budget_summary(self, db: Session, cost_center: str) -> Dict[str, Any]:
        """
        Raises:
            NotFoundError: If the cost center has no budget
        """
        budget = self.get_budget_by_cost_center(db, cost_center)
        if not budget:
            raise NotFoundError("Budget not found")
        return self._summarize(db, budget)

    def list_budget_summaries(self, db: Session) -> List[Dict[str, Any]]:
        """
        Every budget with its current usage and remaining amount
        """
        return [self._summarize(db, budget) for budget in self.list_budgets(db)]

    def _summarize(self, db: Session, budget: Budget) -> Dict[str, Any]:
        usage = self.calculate_budget_usage(db, budget.cost_center)
        return {
            "id": budget.id,
            "name": budget.name,
            "cost_center": budget.cost_center,
            "amount": budget.amount,
            "currency": budget.currency,
            "period": budget.period,
            "usage": usage["usage"],
            "remaining": usage["remaining"],
        }


# Create singleton instance
budget_service = BudgetService()
