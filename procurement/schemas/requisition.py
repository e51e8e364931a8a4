"""
Requisition Schemas
Pydantic models for requisition create/edit and responses
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List, Literal
from datetime import datetime

from procurement.models.requisition import ItemCategory, RequisitionStatus


class RequisitionItemInput(BaseModel):
    """Line item as entered on the requisition form"""
    id: Optional[int] = None
    sku: Optional[str] = None
    description: str = Field(min_length=3)
    quantity: float = Field(gt=0)
    uom: str = Field(default="unit", min_length=1)
    unit_price: float = Field(ge=0)
    currency: str = Field(default="IDR", min_length=3, max_length=3)
    category: ItemCategory
    vendor_preference_id: Optional[int] = None


class RequisitionCreate(BaseModel):
    """Schema for creating or editing a requisition"""
    department: str = Field(min_length=2, description="Department is required")
    cost_center: str = Field(min_length=2, description="Cost center is required")
    needed_by: datetime
    notes: Optional[str] = None
    items: List[RequisitionItemInput] = Field(min_length=1, description="Add at least one line item")

    @field_validator("department", "cost_center", mode="before")
    @classmethod
    def strip_whitespace(cls, value):
        return value.strip() if isinstance(value, str) else value



class RequisitionItemResponse(BaseModel):
    """Line item response"""
    id: int
    sku: Optional[str] = None
    description: str
    quantity: float
    uom: str
    unit_price: float
    currency: str
    category: ItemCategory
    vendor_preference_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class ApprovalStep(BaseModel):
    """One step of a requisition's approval sequence"""
    order: int
    role: str


class ApprovalEvent(BaseModel):
    """Approval trail entry"""
    step: int
    role: str
    user_id: Optional[int] = None
    action: Literal["submitted", "approved", "returned", "rejected"]
    comment: Optional[str] = None
    at: datetime


class RequisitionResponse(BaseModel):
    """Schema for requisition response"""
    id: int
    req_no: str
    requester_id: int
    department: str
    cost_center: str
    needed_by: datetime
    status: RequisitionStatus
    notes: Optional[str] = None
    total: float
    items: List[RequisitionItemResponse]
    approval_steps: List[ApprovalStep]
    approval_trail: List[ApprovalEvent]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RequisitionListResponse(BaseModel):
    """Paged requisition list"""
    requisitions: List[RequisitionResponse]
    page: int
    page_size: int
    total: int
