"""
Requisition Routes
Create, edit, list and submit purchase requisitions
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime

from procurement.config.database import get_db
from procurement.services.auth_service import auth_service
from procurement.services.requisition_service import requisition_service
from procurement.schemas.requisition import (
    RequisitionCreate,
    RequisitionListResponse,
    RequisitionResponse,
)
from procurement.models.requisition import RequisitionStatus
from procurement.models.user import User

router = APIRouter()


@router.get("", response_model=RequisitionListResponse)
async def list_requisitions(
    status_filter: Optional[RequisitionStatus] = Query(None, alias="status"),
    requester_id: Optional[int] = Query(None, description="Filter by requester"),
    search: Optional[str] = Query(None, description="Search requisition number, department or cost center"),
    date_from: Optional[datetime] = Query(None, description="Created on or after"),
    date_to: Optional[datetime] = Query(None, description="Created on or before"),
    sort_by: str = Query("created_at", description="created_at, total, req_no, department, cost_center, status, needed_by"),
    sort_dir: str = Query("desc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """
    List requisitions with filters, sorting and pagination
    """
    requisitions, total = requisition_service.list_requisitions(
        db,
        status=status_filter,
        requester_id=requester_id,
        search=search,
        date_from=date_from,
        date_to=date_to,
        sort_by=sort_by,
        sort_dir=sort_dir,
        skip=(page - 1) * page_size,
        limit=page_size
    )
    return {
        "requisitions": requisitions,
        "page": page,
        "page_size": page_size,
        "total": total
    }


@router.post("", response_model=RequisitionResponse, status_code=status.HTTP_201_CREATED)
async def create_requisition(
    requisition_data: RequisitionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Create a draft requisition for the current user"""
    return requisition_service.create_requisition(db, requisition_data, current_user)


@router.get("/{requisition_id}", response_model=RequisitionResponse)
async def get_requisition(
    requisition_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    return requisition_service.get_requisition(db, requisition_id)


@router.put("/{requisition_id}", response_model=RequisitionResponse)
async def update_requisition(
    requisition_id: int,
    requisition_data: RequisitionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """
    Edit a draft requisition (requester or procurement admin)

    Clears any previous approval steps and trail.
    """
    return requisition_service.update_requisition(db, requisition_id, requisition_data, current_user)


@router.delete("/{requisition_id}")
async def delete_requisition(
    requisition_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.require_permission("manage_requisitions"))
):
    req_no = requisition_service.delete_requisition(db, requisition_id, current_user)
    return {
        "success": True,
        "message": f"Requisition {req_no} deleted"
    }


@router.post("/{requisition_id}/submit", response_model=RequisitionResponse)
async def submit_requisition(
    requisition_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """
    Submit a draft requisition for approval

    **Checks:**
    - requisition is a draft
    - caller is the requester or a procurement admin
    - total fits the cost center's remaining budget
    """
    return requisition_service.submit_requisition(db, requisition_id, current_user)
