"""
Purchase Order Schemas
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime

from procurement.models.purchase_order import POStatus


class POLine(BaseModel):
    """PO line copied from a requisition item"""
    requisition_item_id: int
    quantity: float
    unit_price: float
    total: float


class PurchaseOrderCreate(BaseModel):
    """Schema for raising a PO draft from a requisition"""
    requisition_id: int
    vendor_id: int
    quote_total: Optional[float] = Field(default=None, ge=0)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    terms: Optional[str] = None


class PurchaseOrderUpdate(BaseModel):
    """Schema for moving a PO along its lifecycle"""
    status: POStatus


class PurchaseOrderResponse(BaseModel):
    """Schema for purchase order response"""
    id: int
    po_no: str
    vendor_id: Optional[int] = None
    vendor_email: Optional[str] = None
    status: POStatus
    lines: List[POLine]
    total: float
    currency: str
    terms: str
    linked_requisition_ids: List[int]
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
