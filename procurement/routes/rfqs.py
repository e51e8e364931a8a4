"""
RFQ Routes
Requests for quotation managed by approvers and procurement admins
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from procurement.config.database import get_db
from procurement.services.auth_service import auth_service
from procurement.services.rfq_service import rfq_service
from procurement.schemas.purchase_order import PurchaseOrderResponse
from procurement.schemas.rfq import RfqClose, RfqCreate, RfqCreatePo, RfqResponse, RfqUpdate
from procurement.models.user import User

router = APIRouter()


@router.get("", response_model=List[RfqResponse])
async def list_rfqs(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    return rfq_service.list_rfqs(db)


@router.post("", response_model=RfqResponse, status_code=status.HTTP_201_CREATED)
async def create_rfq(
    rfq_data: RfqCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """
    Create a draft RFQ for an approved requisition

    **Requirements:**
    - caller is an approver or procurement admin
    - at least one registered vendor
    - due date in the future
    """
    return rfq_service.create_rfq(db, rfq_data, current_user)


@router.get("/{rfq_id}", response_model=RfqResponse)
async def get_rfq(
    rfq_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    return rfq_service.get_rfq(db, rfq_id)


@router.put("/{rfq_id}", response_model=RfqResponse)
async def update_rfq(
    rfq_id: int,
    rfq_data: RfqUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.require_permission("create_rfq"))
):
    return rfq_service.update_rfq(db, rfq_id, rfq_data, current_user)


@router.post("/{rfq_id}/send", response_model=RfqResponse)
async def send_rfq(
    rfq_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.require_permission("create_rfq"))
):
    return rfq_service.send_rfq(db, rfq_id, current_user)


@router.post("/{rfq_id}/close")
async def close_rfq(
    close_data: RfqClose,
    rfq_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.require_permission("create_rfq"))
):
    """
    Close an RFQ, awarding it to one of its vendors

    A draft PO is raised from the winner's quote.
    """
    result = rfq_service.close_rfq(db, rfq_id, close_data.winner_vendor_id, current_user)
    return {
        "rfq": RfqResponse.model_validate(result["rfq"]),
        "purchase_order": PurchaseOrderResponse.model_validate(result["purchase_order"])
    }


@router.post("/{rfq_id}/create-po", response_model=PurchaseOrderResponse, status_code=status.HTTP_201_CREATED)
async def create_po_from_rfq(
    po_data: RfqCreatePo,
    rfq_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.require_permission("create_po"))
):
    return rfq_service.create_po_from_rfq(db, rfq_id, po_data.vendor_id, current_user)
