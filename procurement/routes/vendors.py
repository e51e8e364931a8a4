"""
Vendor Routes
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from procurement.config.database import get_db
from procurement.services.auth_service import auth_service
from procurement.services.vendor_service import vendor_service
from procurement.schemas.vendor import VendorCreate, VendorResponse
from procurement.models.user import User

router = APIRouter()


@router.get("", response_model=List[VendorResponse])
async def list_vendors(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    return vendor_service.list_vendors(db)


@router.post("", response_model=VendorResponse, status_code=status.HTTP_201_CREATED)
async def create_vendor(
    vendor_data: VendorCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.require_permission("manage_vendors"))
):
    """Register a vendor; names are unique regardless of case"""
    return vendor_service.create_vendor(db, vendor_data, current_user)


@router.put("/{vendor_id}", response_model=VendorResponse)
async def update_vendor(
    vendor_id: int,
    vendor_data: VendorCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.require_permission("manage_vendors"))
):
    return vendor_service.update_vendor(db, vendor_id, vendor_data, current_user)


@router.delete("/{vendor_id}")
async def delete_vendor(
    vendor_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.require_permission("manage_vendors"))
):
    name = vendor_service.delete_vendor(db, vendor_id, current_user)
    return {
        "success": True,
        "message": f"Vendor {name} deleted"
    }
