"""
Purchase Order Service
Raises PO drafts from requisitions and moves POs through their lifecycle
"""

from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime

from procurement.config.settings import settings
from procurement.models.purchase_order import PurchaseOrder, POStatus
from procurement.models.requisition import RequisitionStatus
from procurement.models.user import User
from procurement.repositories.purchase_order_repository import PurchaseOrderRepository
from procurement.repositories.requisition_repository import RequisitionRepository
from procurement.repositories.vendor_repository import VendorRepository
from procurement.services.budget_service import budget_service
from procurement.services.notification_service import notification_service
from procurement.utils.exceptions import InvalidStateError, NotFoundError
from procurement.utils.helpers import generate_document_number
from procurement.utils.logger import setup_logger, log_audit

logger = setup_logger()

CONVERTIBLE_STATUSES = {RequisitionStatus.APPROVED, RequisitionStatus.CONVERTED}
LOCKED_PO_STATUSES = {POStatus.CLOSED, POStatus.CANCELED}


class PurchaseOrderService:
    """Service for purchase order business logic"""

    def list_purchase_orders(self, db: Session) -> List[PurchaseOrder]:
        return PurchaseOrderRepository(db).list()

    def get_purchase_order(self, db: Session, po_id: int) -> PurchaseOrder:
        po = PurchaseOrderRepository(db).get(po_id)
        if not po:
            raise NotFoundError("PO not found")
        return po

    def create_po_draft(
        self,
        db: Session,
        requisition_id: int,
        vendor_id: Optional[int] = None,
        vendor_email: Optional[str] = None,
        quote_total: Optional[float] = None,
        currency: Optional[str] = None,
        terms: Optional[str] = None,
        user: Optional[User] = None,
        commit: bool = True
    ) -> PurchaseOrder:
        """
        Create a draft PO for an approved requisition

        Lines are copied from the requisition items. The PO total is the
        quote total when given, otherwise the requisition total, and must
        fit the cost center's budget with the requisition itself left out
        of the usage. The requisition becomes converted.

        Args:
            db: Database session
            requisition_id: Source requisition
            vendor_id: Registered vendor
            vendor_email: Unregistered vendor, used when vendor_id is not set
            quote_total: Winning quote total
            currency: PO currency, defaults to the configured currency
            terms: Payment terms, defaults to the standard terms
            user: Acting user, for the audit log
            commit: False when the caller commits as part of a larger change

        Raises:
            NotFoundError: Unknown requisition or vendor
            InvalidStateError: Requisition is not approved or converted
            BudgetExceededError: PO total exceeds the remaining budget
        """
        requisition = RequisitionRepository(db).get(requisition_id)
        if not requisition:
            raise NotFoundError("Requisition not found")
        if requisition.status not in CONVERTIBLE_STATUSES:
            raise InvalidStateError("Only approved requisitions can be converted to a purchase order")
        if vendor_id is not None and not VendorRepository(db).get(vendor_id):
            raise NotFoundError("Vendor not found")

        total = quote_total if quote_total is not None else requisition.total

        budget_service.ensure_budget_available(
            db,
            requisition.cost_center,
            total,
            exclude_requisition_ids=[requisition.id]
        )

        repo = PurchaseOrderRepository(db)
        now = datetime.utcnow()
        po = PurchaseOrder(
            po_no=generate_document_number(f"PO-{settings.DOCUMENT_YEAR}-", repo.all_numbers()),
            vendor_id=vendor_id,
            vendor_email=None if vendor_id is not None else vendor_email,
            status=POStatus.DRAFT,
            lines=[
                {
                    "requisition_item_id": item.id,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "total": item.line_total
                }
                for item in requisition.items
            ],
            total=total,
            currency=(currency or settings.DEFAULT_CURRENCY).upper(),
            terms=terms or settings.DEFAULT_PO_TERMS,
            linked_requisition_ids=[requisition.id],
            created_at=now,
            updated_at=now
        )
        repo.save(po)

        requisition.status = RequisitionStatus.CONVERTED
        requisition.updated_at = now
        notification_service.notify_po_created(db, requisition, po.po_no)

        if commit:
            repo.commit()
            db.refresh(po)

        log_audit(user.id if user else None, "create_po_draft", f"{po.po_no} from {requisition.req_no} total={po.total}")
        logger.info(f"PO {po.po_no} drafted from requisition {requisition.req_no}")
        return po

    def update_purchase_order(self, db: Session, po_id: int, status: POStatus, user: User) -> PurchaseOrder:
        """
        Change a PO's status

        Raises:
            NotFoundError: Unknown PO
            InvalidStateError: PO is closed or canceled
        """
        repo = PurchaseOrderRepository(db)
        po = self.get_purchase_order(db, po_id)

        if po.status in LOCKED_PO_STATUSES:
            raise InvalidStateError("Closed or canceled purchase orders cannot be edited")

        previous = po.status
        po.status = status
        po.updated_at = datetime.utcnow()
        repo.save(po)
        repo.commit()
        db.refresh(po)

        log_audit(user.id, "update_po", f"{po.po_no} {previous.value} -> {status.value}")
        return po


# Create singleton instance
purchase_order_service = PurchaseOrderService()
