"""
RFQ Schemas
Pydantic models for requests for quotation, vendor quotes and the public vendor view
"""

from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from typing import Optional, List, Literal
from datetime import datetime

from procurement.models.requisition import ItemCategory
from procurement.models.rfq import RfqStatus


class QuoteItem(BaseModel):
    """Quoted price for one requisition item"""
    requisition_item_id: int
    unit_price: float = Field(ge=0)
    currency: str = Field(min_length=3, max_length=3)
    lead_time_days: int = Field(ge=0)
    notes: Optional[str] = None


class Quote(BaseModel):
    """Vendor quote stored on an RFQ"""
    vendor_id: str
    vendor_name: Optional[str] = None
    vendor_email: Optional[str] = None
    vendor_company: Optional[str] = None
    items: List[QuoteItem]
    subtotal: float = Field(ge=0)
    taxes: float = Field(ge=0)
    shipping: float = Field(ge=0)
    total: float = Field(ge=0)
    lead_time_days: int = Field(ge=0)
    payment_terms: str
    notes: Optional[str] = None
    submitted_at: Optional[datetime] = None
    source: Optional[Literal["admin", "vendor"]] = None


class RfqCreate(BaseModel):
    """Schema for creating an RFQ"""
    requisition_id: int
    vendor_ids: List[int] = Field(min_length=1, description="Select at least one vendor")
    due_date: datetime

    @field_validator("due_date")
    @classmethod
    def due_date_in_future(cls, value: datetime) -> datetime:
        now = datetime.now(value.tzinfo) if value.tzinfo else datetime.utcnow()
        if value <= now:
            raise ValueError("Due date must be in the future")
        return value


class RfqUpdate(BaseModel):
    """Partial RFQ update"""
    status: Optional[RfqStatus] = None
    due_date: Optional[datetime] = None
    quotes: Optional[List[Quote]] = None


class RfqClose(BaseModel):
    """Close an RFQ and award it"""
    winner_vendor_id: str = Field(min_length=1)


class RfqCreatePo(BaseModel):
    vendor_id: str = Field(min_length=1)


class RfqResponse(BaseModel):
    """Schema for RFQ response"""
    id: int
    rfq_no: str
    requisition_id: int
    vendor_ids: List[str]
    status: RfqStatus
    quotes: List[Quote]
    due_date: datetime
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class VendorQuoteItemInput(BaseModel):
    requisition_item_id: int
    unit_price: float = Field(ge=0)
    lead_time_days: int = Field(ge=0)
    notes: Optional[str] = None


class VendorQuoteSubmission(BaseModel):
    """Quote submitted by a vendor through the public RFQ page"""
    vendor_name: str = Field(min_length=2, description="Vendor name is required")
    vendor_email: EmailStr
    vendor_company: Optional[str] = None
    payment_terms: str = Field(min_length=3)
    taxes: float = Field(default=0, ge=0)
    shipping: float = Field(default=0, ge=0)
    notes: Optional[str] = None
    items: List[VendorQuoteItemInput] = Field(min_length=1)


class PublicRequisitionItem(BaseModel):
    id: int
    description: str
    quantity: float
    uom: str
    currency: str
    category: ItemCategory

    model_config = ConfigDict(from_attributes=True)


class PublicRequisition(BaseModel):
    id: int
    department: str
    needed_by: datetime
    items: List[PublicRequisitionItem]

    model_config = ConfigDict(from_attributes=True)


class RfqPublicView(BaseModel):
    """What a vendor sees of an RFQ; no prices or competing quotes"""
    id: int
    rfq_no: str
    status: RfqStatus
    due_date: datetime
    requisition: PublicRequisition

    model_config = ConfigDict(from_attributes=True)
