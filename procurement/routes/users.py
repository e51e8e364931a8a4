"""
User Routes
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from procurement.config.database import get_db
from procurement.services.auth_service import auth_service
from procurement.services.user_service import user_service
from procurement.schemas.user import UserCreate, UserResponse
from procurement.models.user import User

router = APIRouter()


@router.get("", response_model=List[UserResponse])
async def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.require_permission("manage_users"))
):
    """List all users (approver, procurement admin)"""
    return user_service.list_users(db)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.require_permission("manage_users"))
):
    """Create a user account; e-mails are unique"""
    return user_service.create_user(db, user_data, current_user)
