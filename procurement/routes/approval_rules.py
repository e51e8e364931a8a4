"""
Approval Rule Routes
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from procurement.config.database import get_db
from procurement.services.auth_service import auth_service
from procurement.services.approval_rule_service import approval_rule_service
from procurement.schemas.approval import ApprovalRuleCreate, ApprovalRuleResponse
from procurement.models.user import User

router = APIRouter()


@router.get("", response_model=List[ApprovalRuleResponse])
async def list_approval_rules(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """List approval rules, newest first"""
    return approval_rule_service.list_rules(db)


@router.post("", response_model=ApprovalRuleResponse, status_code=status.HTTP_201_CREATED)
async def create_approval_rule(
    rule_data: ApprovalRuleCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.require_permission("manage_approval_rules"))
):
    """
    Create an approval rule (procurement admin)

    Steps are numbered in the order given.
    """
    return approval_rule_service.create_rule(db, rule_data, current_user)


@router.put("/{rule_id}", response_model=ApprovalRuleResponse)
async def update_approval_rule(
    rule_id: int,
    rule_data: ApprovalRuleCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.require_permission("manage_approval_rules"))
):
    return approval_rule_service.update_rule(db, rule_id, rule_data, current_user)


@router.delete("/{rule_id}")
async def delete_approval_rule(
    rule_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.require_permission("manage_approval_rules"))
):
    name = approval_rule_service.delete_rule(db, rule_id, current_user)
    return {
        "success": True,
        "message": f"Approval rule '{name}' deleted"
    }
