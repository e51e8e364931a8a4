"""
Notification Model
Represents in-app notifications sent to users
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Boolean, Enum
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from procurement.config.database import Base


class NotificationType(str, enum.Enum):
    """Notification types"""
    APPROVAL_REQUIRED = "approval_required"
    REQUISITION_APPROVED = "requisition_approved"
    REQUISITION_RETURNED = "requisition_returned"
    PO_CREATED = "po_created"


class Notification(Base):
    """Notification model"""
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # Notification details
    type = Column(Enum(NotificationType), nullable=False)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)

    # Related requisition (optional)
    requisition_id = Column(Integer, ForeignKey("requisitions.id"), nullable=True)

    # Status
    is_read = Column(Boolean, default=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    read_at = Column(DateTime, nullable=True)

    # Relationships
    user = relationship("User", back_populates="notifications")

    def __repr__(self):
        return f"<Notification {self.type.value} - User {self.user_id}>"
