"""
Purchase Order Routes
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from procurement.config.database import get_db
from procurement.services.auth_service import auth_service
from procurement.services.purchase_order_service import purchase_order_service
from procurement.schemas.purchase_order import (
    PurchaseOrderCreate,
    PurchaseOrderResponse,
    PurchaseOrderUpdate,
)
from procurement.models.user import User

router = APIRouter()


@router.get("", response_model=List[PurchaseOrderResponse])
async def list_purchase_orders(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    return purchase_order_service.list_purchase_orders(db)


@router.post("", response_model=PurchaseOrderResponse, status_code=status.HTTP_201_CREATED)
async def create_purchase_order(
    po_data: PurchaseOrderCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.require_permission("create_po"))
):
    """
    Raise a draft PO from an approved requisition

    The PO total must fit the cost center's remaining budget. The
    requisition is marked converted.
    """
    return purchase_order_service.create_po_draft(
        db,
        requisition_id=po_data.requisition_id,
        vendor_id=po_data.vendor_id,
        quote_total=po_data.quote_total,
        currency=po_data.currency,
        terms=po_data.terms,
        user=current_user
    )


@router.get("/{po_id}", response_model=PurchaseOrderResponse)
async def get_purchase_order(
    po_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    return purchase_order_service.get_purchase_order(db, po_id)


@router.put("/{po_id}", response_model=PurchaseOrderResponse)
async def update_purchase_order(
    po_id: int,
    po_data: PurchaseOrderUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.require_permission("update_po"))
):
    """Change a PO's status; closed and canceled POs are locked"""
    return purchase_order_service.update_purchase_order(db, po_id, po_data.status, current_user)
