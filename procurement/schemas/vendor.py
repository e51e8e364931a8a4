"""
Vendor Schemas
"""

from pydantic import BaseModel, EmailStr, Field, ConfigDict

from procurement.models.requisition import ItemCategory


class VendorBase(BaseModel):
    """Fields shared by vendor input and output"""
    name: str = Field(..., min_length=2, max_length=120)
    phone: str = Field(..., min_length=6)
    category: ItemCategory
    rating: int = Field(default=3, ge=1, le=5)
    address: str = Field(..., min_length=4)
    tax_id: str = ""


class VendorCreate(VendorBase):
    """Schema for creating or updating a vendor"""
    email: EmailStr
    is_active: bool = True


class VendorResponse(VendorBase):
    """Schema for vendor response"""
    id: int
    email: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)
