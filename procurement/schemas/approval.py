"""
Approval Schemas
Pydantic models for approval actions, approval rules and the inbox
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List, Literal, Dict, Any

from procurement.models.approval_rule import ApprovalRole
from procurement.models.requisition import ItemCategory
from procurement.schemas.requisition import ApprovalStep, RequisitionResponse


class ApprovalActionRequest(BaseModel):
    """Schema for approving or returning a requisition"""
    requisition_id: int
    action: Literal["approved", "returned"]
    comment: Optional[str] = None


class ApprovalRuleConditions(BaseModel):
    """Rule conditions; every condition set must hold for a match"""
    amount_gte: Optional[float] = Field(default=None, ge=0)
    category: Optional[ItemCategory] = None
    cost_center: Optional[str] = None

    @field_validator("category", "cost_center", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ApprovalRuleStepInput(BaseModel):
    """Rule step as entered; steps are renumbered by position"""
    role: ApprovalRole
    order: Optional[int] = None


class ApprovalRuleCreate(BaseModel):
    """Schema for creating or updating an approval rule"""
    name: str = Field(min_length=3)
    conditions: ApprovalRuleConditions
    steps: List[ApprovalRuleStepInput]


class ApprovalRuleResponse(BaseModel):
    """Schema for approval rule response"""
    id: int
    name: str
    conditions: Dict[str, Any]
    steps: List[ApprovalStep]

    model_config = ConfigDict(from_attributes=True)


class ApprovalInboxItem(BaseModel):
    """Requisition waiting on the current user's role"""
    requisition_id: int
    requisition: RequisitionResponse
    current_step: ApprovalStep
