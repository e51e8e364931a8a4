"""
Purchase Order Model
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, Enum, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from procurement.config.database import Base


class POStatus(str, enum.Enum):
    """Purchase order status"""
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    ISSUED = "issued"
    PARTIALLY_RECEIVED = "partially_received"
    CLOSED = "closed"
    CANCELED = "canceled"


class PurchaseOrder(Base):
    """Purchase order model"""
    __tablename__ = "purchase_orders"

    id = Column(Integer, primary_key=True, index=True)
    po_no = Column(String, unique=True, index=True, nullable=False)

    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=True)
    # Set instead of vendor_id when the quote came from an unregistered vendor
    vendor_email = Column(String, nullable=True)
    status = Column(Enum(POStatus), default=POStatus.DRAFT, nullable=False)

    # [{"requisition_item_id", "quantity", "unit_price", "total"}, ...]
    lines = Column(JSON, default=list, nullable=False)
    total = Column(Float, nullable=False, default=0.0)
    currency = Column(String(3), nullable=False, default="IDR")
    terms = Column(String, nullable=False, default="")

    # Requisition ids this PO commits budget for
    linked_requisition_ids = Column(JSON, default=list, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    vendor = relationship("Vendor")

    def __repr__(self):
        return f"<PurchaseOrder {self.po_no} - {self.status.value}>"
