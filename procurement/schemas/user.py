"""
User Schemas
Pydantic models for user-related requests and responses
"""

from pydantic import BaseModel, EmailStr, Field, ConfigDict
from typing import Optional
from datetime import datetime

from procurement.models.user import UserRole


class UserBase(BaseModel):
    """Base user schema with common fields"""
    full_name: str = Field(..., min_length=2, max_length=200)
    department: Optional[str] = None


class UserCreate(UserBase):
    """Schema for creating a new user"""
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: UserRole = UserRole.EMPLOYEE


class UserResponse(UserBase):
    """Schema for user response"""
    id: int
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime
    last_login: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
