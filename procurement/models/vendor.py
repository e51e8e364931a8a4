"""
Vendor Model
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum
from datetime import datetime

from procurement.config.database import Base
from procurement.models.requisition import ItemCategory


class Vendor(Base):
    """Vendor model"""
    __tablename__ = "vendors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    email = Column(String, index=True, nullable=False)
    phone = Column(String, nullable=False)
    category = Column(Enum(ItemCategory), nullable=False)
    rating = Column(Integer, nullable=False, default=3)
    address = Column(String, nullable=False)
    tax_id = Column(String, nullable=False, default="")
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Vendor {self.name}>"
