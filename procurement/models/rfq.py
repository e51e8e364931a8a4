"""
RFQ Model
Requests for quotation sent to vendors for an approved requisition
"""

from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from procurement.config.database import Base


class RfqStatus(str, enum.Enum):
    """RFQ status"""
    DRAFT = "draft"
    SENT = "sent"
    RECEIVED = "received"
    CLOSED = "closed"


class RFQ(Base):
    """RFQ model"""
    __tablename__ = "rfqs"

    id = Column(Integer, primary_key=True, index=True)
    rfq_no = Column(String, unique=True, index=True, nullable=False)

    requisition_id = Column(Integer, ForeignKey("requisitions.id"), nullable=False)

    # Vendor ids invited; unregistered vendors are keyed by e-mail
    vendor_ids = Column(JSON, default=list, nullable=False)
    status = Column(Enum(RfqStatus), default=RfqStatus.DRAFT, nullable=False)

    # Quote dicts, see schemas.rfq.Quote
    quotes = Column(JSON, default=list, nullable=False)

    due_date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    requisition = relationship("Requisition")

    def __repr__(self):
        return f"<RFQ {self.rfq_no} - {self.status.value}>"

    def quote_for(self, vendor_id: str):
        """Return the quote submitted by a vendor, if any"""
        return next(
            (quote for quote in self.quotes or [] if str(quote.get("vendor_id")) == str(vendor_id)),
            None
        )
