"""
Public Vendor Routes
RFQ view and quote submission for vendors; no login required
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from procurement.config.database import get_db
from procurement.services.rfq_service import rfq_service
from procurement.schemas.rfq import Quote, RfqPublicView, VendorQuoteSubmission

router = APIRouter()


@router.get("/rfqs/{identifier}")
async def get_public_rfq(
    identifier: str,
    db: Session = Depends(get_db)
):
    """
    RFQ details for vendors, by id or RFQ number (case-insensitive)

    Prices and competing quotes are not included.
    """
    rfq = rfq_service.get_public_view(db, identifier)
    return {"rfq": RfqPublicView.model_validate(rfq)}


@router.post("/rfqs/{identifier}/quotes", status_code=status.HTTP_201_CREATED)
async def submit_quote(
    identifier: str,
    quote_data: VendorQuoteSubmission,
    db: Session = Depends(get_db)
):
    """
    Submit or replace a vendor quote

    **Computed:**
    - subtotal: requisition quantity x quoted unit price, summed
    - total: subtotal + taxes + shipping
    - lead_time_days: longest item lead time
    """
    quote = rfq_service.submit_vendor_quote(db, identifier, quote_data)
    return {
        "success": True,
        "quote": Quote.model_validate(quote)
    }
