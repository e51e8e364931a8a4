"""
Requisition Model
Purchase requisitions raised by employees and routed through approval steps
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, Enum, ForeignKey, Text, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from procurement.config.database import Base


class RequisitionStatus(str, enum.Enum):
    """Requisition status"""
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    CONVERTED = "converted"


class ItemCategory(str, enum.Enum):
    """Line item / vendor categories"""
    IT = "IT"
    OFFICE = "Office"
    LOGISTICS = "Logistics"
    SERVICES = "Services"
    FACILITIES = "Facilities"


class TrailAction(str, enum.Enum):
    """Actions recorded in the approval trail"""
    SUBMITTED = "submitted"
    APPROVED = "approved"
    RETURNED = "returned"
    REJECTED = "rejected"


class Requisition(Base):
    """Requisition model"""
    __tablename__ = "requisitions"

    id = Column(Integer, primary_key=True, index=True)
    req_no = Column(String, unique=True, index=True, nullable=False)

    # Requester information
    requester_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    department = Column(String, nullable=False)
    cost_center = Column(String, index=True, nullable=False)
    needed_by = Column(DateTime, nullable=False)
    notes = Column(Text, nullable=True)

    total = Column(Float, default=0.0, nullable=False)
    status = Column(Enum(RequisitionStatus), default=RequisitionStatus.DRAFT, nullable=False)

    # Approval workflow
    # [{"order": 1, "role": "approver"}, ...] fixed at submission
    approval_steps = Column(JSON, default=list, nullable=False)
    # [{"step", "role", "user_id", "action", "comment", "at"}, ...] append-only
    approval_trail = Column(JSON, default=list, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    requester = relationship("User", back_populates="requisitions")
    items = relationship(
        "RequisitionItem",
        back_populates="requisition",
        cascade="all, delete-orphan",
        order_by="RequisitionItem.id"
    )
    notifications = relationship("Notification", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Requisition {self.req_no} - {self.status.value}>"

    def calculate_total(self) -> float:
        """Sum of quantity x unit price over all line items"""
        return sum(item.quantity * item.unit_price for item in self.items)

    def has_category(self, category: str) -> bool:
        """Check if any line item belongs to the given category"""
        return any(_enum_value(item.category) == category for item in self.items)


class RequisitionItem(Base):
    """Requisition line item"""
    __tablename__ = "requisition_items"

    id = Column(Integer, primary_key=True, index=True)
    requisition_id = Column(Integer, ForeignKey("requisitions.id"), nullable=False)

    sku = Column(String, nullable=True)
    description = Column(String, nullable=False)
    quantity = Column(Float, nullable=False)
    uom = Column(String, nullable=False, default="unit")
    unit_price = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False, default="IDR")
    category = Column(Enum(ItemCategory), nullable=False)
    vendor_preference_id = Column(Integer, ForeignKey("vendors.id"), nullable=True)

    requisition = relationship("Requisition", back_populates="items")

    @property
    def line_total(self) -> float:
        return self.quantity * self.unit_price

    def __repr__(self):
        return f"<RequisitionItem {self.description} x{self.quantity}>"


def _enum_value(value):
    return value.value if isinstance(value, enum.Enum) else value
