"""
RFQ Service
Requests for quotation: creation, sending, vendor quotes and awarding
"""

from sqlalchemy.orm import Session
from typing import Dict, List, Optional
from datetime import datetime

from procurement.config.settings import settings
from procurement.models.purchase_order import PurchaseOrder
from procurement.models.requisition import RequisitionStatus
from procurement.models.rfq import RFQ, RfqStatus
from procurement.models.user import User, UserRole
from procurement.repositories.requisition_repository import RequisitionRepository
from procurement.repositories.rfq_repository import RfqRepository
from procurement.repositories.vendor_repository import VendorRepository
from procurement.schemas.rfq import Quote, RfqCreate, RfqUpdate, VendorQuoteSubmission
from procurement.services.purchase_order_service import purchase_order_service
from procurement.utils.exceptions import (
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from procurement.utils.helpers import generate_document_number
from procurement.utils.logger import setup_logger, log_audit

logger = setup_logger()

RFQ_CREATOR_ROLES = {UserRole.APPROVER, UserRole.PROCUREMENT_ADMIN}
QUOTABLE_REQUISITION_STATUSES = {RequisitionStatus.APPROVED, RequisitionStatus.CONVERTED}


class RfqService:
    """
    Service for RFQ business logic

    Vendors on an RFQ are keyed by string: the vendor id for registered
    vendors, the lower-cased e-mail for vendors quoting without an account.
    """

    def list_rfqs(self, db: Session) -> List[RFQ]:
        return RfqRepository(db).list()

    def get_rfq(self, db: Session, rfq_id: int) -> RFQ:
        rfq = RfqRepository(db).get(rfq_id)
        if not rfq:
            raise NotFoundError("RFQ not found")
        return rfq

    def create_rfq(self, db: Session, data: RfqCreate, user: User) -> RFQ:
        """
        Create a draft RFQ for an approved requisition

        Raises:
            ForbiddenError: User is neither approver nor procurement admin
            NotFoundError: Unknown requisition or vendor
            InvalidStateError: Requisition is not approved or converted
        """
        if user.role not in RFQ_CREATOR_ROLES:
            raise ForbiddenError("Only approver or procurement admin can create RFQ")

        requisition = RequisitionRepository(db).get(data.requisition_id)
        if not requisition:
            raise NotFoundError("Requisition not found")
        if requisition.status not in QUOTABLE_REQUISITION_STATUSES:
            raise InvalidStateError("Only approved requisitions can be converted to RFQ")

        vendor_repo = VendorRepository(db)
        for vendor_id in data.vendor_ids:
            if not vendor_repo.get(vendor_id):
                raise NotFoundError(f"Vendor {vendor_id} not found")

        repo = RfqRepository(db)
        rfq = RFQ(
            rfq_no=generate_document_number(f"RFQ-{settings.DOCUMENT_YEAR}-", repo.all_numbers(), width=3),
            requisition_id=requisition.id,
            vendor_ids=list(dict.fromkeys(str(vendor_id) for vendor_id in data.vendor_ids)),
            status=RfqStatus.DRAFT,
            quotes=[],
            due_date=data.due_date,
            created_at=datetime.utcnow()
        )
        repo.save(rfq)
        repo.commit()
        db.refresh(rfq)

        log_audit(user.id, "create_rfq", f"{rfq.rfq_no} for {requisition.req_no} vendors={rfq.vendor_ids}")
        return rfq

    def update_rfq(self, db: Session, rfq_id: int, data: RfqUpdate, user: User) -> RFQ:
        """Replace quotes, status or due date of an RFQ"""
        repo = RfqRepository(db)
        rfq = self.get_rfq(db, rfq_id)

        if data.quotes is not None:
            rfq.quotes = [quote.model_dump(mode="json") for quote in data.quotes]
        if data.status is not None:
            rfq.status = data.status
        if data.due_date is not None:
            rfq.due_date = data.due_date

        repo.save(rfq)
        repo.commit()
        db.refresh(rfq)

        log_audit(user.id, "update_rfq", f"{rfq.rfq_no} status={rfq.status.value}")
        return rfq

    def send_rfq(self, db: Session, rfq_id: int, user: User) -> RFQ:
        repo = RfqRepository(db)
        rfq = self.get_rfq(db, rfq_id)
        if rfq.status == RfqStatus.CLOSED:
            raise InvalidStateError("RFQ already closed")

        rfq.status = RfqStatus.SENT
        repo.save(rfq)
        repo.commit()
        db.refresh(rfq)

        log_audit(user.id, "send_rfq", rfq.rfq_no)
        return rfq

    def close_rfq(self, db: Session, rfq_id: int, winner_vendor_id: str, user: User) -> Dict:
        """
        Close an RFQ and raise a PO draft for the winning vendor

        The PO takes the winner's quote total, currency and payment terms,
        or the requisition total when the winner never quoted.

        Raises:
            NotFoundError: Unknown RFQ
            ValidationError: Winner is not one of the RFQ's vendors
        """
        repo = RfqRepository(db)
        rfq = self.get_rfq(db, rfq_id)
        winner = str(winner_vendor_id).strip().lower()

        if winner not in [str(vendor_id).lower() for vendor_id in rfq.vendor_ids or []]:
            raise ValidationError("Winner must be part of RFQ vendors")

        po = self._draft_po(db, rfq, winner, user)
        rfq.status = RfqStatus.CLOSED
        repo.save(rfq)
        repo.commit()
        db.refresh(rfq)
        db.refresh(po)

        log_audit(user.id, "close_rfq", f"{rfq.rfq_no} winner={winner} po={po.po_no}")
        return {"rfq": rfq, "purchase_order": po}

    def create_po_from_rfq(self, db: Session, rfq_id: int, vendor_id: str, user: User) -> PurchaseOrder:
        """Raise a PO draft from an RFQ without closing it"""
        rfq = self.get_rfq(db, rfq_id)
        po = self._draft_po(db, rfq, str(vendor_id).strip().lower(), user)
        db.commit()
        db.refresh(po)
        return po

    def get_public_view(self, db: Session, identifier: str) -> RFQ:
        """
        RFQ as shown to vendors, looked up by id or RFQ number

        Raises:
            NotFoundError: Unknown RFQ or missing requisition
            InvalidStateError: RFQ is closed
        """
        rfq = RfqRepository(db).find_by_identifier(identifier)
        if not rfq or not rfq.requisition:
            raise NotFoundError("RFQ not found")
        if rfq.status == RfqStatus.CLOSED:
            raise InvalidStateError("RFQ is closed")
        return rfq

    def submit_vendor_quote(self, db: Session, identifier: str, data: VendorQuoteSubmission) -> Dict:
        """
        Record a vendor's quote on an RFQ

        Prices are per unit; the subtotal uses the requisition quantities.
        A later quote from the same vendor replaces the earlier one.

        Raises:
            NotFoundError: Unknown RFQ or requisition
            InvalidStateError: RFQ is closed
            ValidationError: Quote references an item outside the requisition
        """
        repo = RfqRepository(db)
        rfq = repo.find_by_identifier(identifier)
        if not rfq:
            raise NotFoundError("RFQ not found")
        if rfq.status == RfqStatus.CLOSED:
            raise InvalidStateError("RFQ already closed")

        requisition = rfq.requisition
        if not requisition:
            raise NotFoundError("Linked requisition not found")

        vendor_email = data.vendor_email.lower()
        vendor = VendorRepository(db).get_by_email(vendor_email)
        vendor_key = str(vendor.id) if vendor else vendor_email

        requisition_items = {item.id: item for item in requisition.items}
        quote_items = []
        subtotal = 0.0
        for item in data.items:
            requisition_item = requisition_items.get(item.requisition_item_id)
            if not requisition_item:
                raise ValidationError("Invalid requisition item in quote")
            quote_items.append({
                "requisition_item_id": requisition_item.id,
                "unit_price": item.unit_price,
                "currency": requisition_item.currency,
                "lead_time_days": item.lead_time_days,
                "notes": item.notes
            })
            subtotal += requisition_item.quantity * item.unit_price

        quote = Quote(
            vendor_id=vendor_key,
            vendor_name=vendor.name if vendor else data.vendor_name,
            vendor_email=vendor_email,
            vendor_company=data.vendor_company,
            items=quote_items,
            subtotal=subtotal,
            taxes=data.taxes,
            shipping=data.shipping,
            total=subtotal + data.taxes + data.shipping,
            lead_time_days=max((item["lead_time_days"] for item in quote_items), default=0),
            payment_terms=data.payment_terms,
            notes=data.notes,
            submitted_at=datetime.utcnow(),
            source="vendor"
        ).model_dump(mode="json")

        quotes = list(rfq.quotes or [])
        index = next((i for i, existing in enumerate(quotes) if existing.get("vendor_id") == vendor_key), None)
        if index is None:
            quotes.append(quote)
        else:
            quotes[index] = quote
        rfq.quotes = quotes

        if rfq.status in (RfqStatus.DRAFT, RfqStatus.SENT):
            rfq.status = RfqStatus.RECEIVED
        if vendor_key not in (rfq.vendor_ids or []):
            rfq.vendor_ids = list(rfq.vendor_ids or []) + [vendor_key]

        repo.save(rfq)
        repo.commit()

        log_audit(None, "submit_quote", f"{rfq.rfq_no} vendor={vendor_key} total={quote['total']}")
        logger.info(f"Quote from {vendor_email} recorded on {rfq.rfq_no}, total {quote['total']}")
        return quote

    def _draft_po(self, db: Session, rfq: RFQ, vendor_key: str, user: Optional[User]) -> PurchaseOrder:
        quote = rfq.quote_for(vendor_key)
        currency = None
        if quote and quote.get("items"):
            currency = quote["items"][0].get("currency")

        return purchase_order_service.create_po_draft(
            db,
            requisition_id=rfq.requisition_id,
            vendor_id=int(vendor_key) if vendor_key.isdigit() else None,
            vendor_email=None if vendor_key.isdigit() else vendor_key,
            quote_total=quote["total"] if quote else None,
            currency=currency,
            terms=quote.get("payment_terms") if quote else None,
            user=user,
            commit=False
        )


# Create singleton instance
rfq_service = RfqService()
