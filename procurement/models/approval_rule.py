"""
Approval Rule Model
Configured rules mapping requisition conditions to ordered approval steps
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, JSON
from datetime import datetime
import enum

from procurement.config.database import Base


class ApprovalRole(str, enum.Enum):
    """Roles that can act on an approval step"""
    APPROVER = "approver"
    FINANCE = "finance"
    PROCUREMENT_ADMIN = "procurement_admin"


class ApprovalRule(Base):
    """Approval rule model"""
    __tablename__ = "approval_rules"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)

    # Conditions - every non-null condition must hold for the rule to match
    amount_gte = Column(Float, nullable=True)
    category = Column(String, nullable=True)
    cost_center = Column(String, nullable=True)

    # [{"order": 1, "role": "approver"}, ...]
    steps = Column(JSON, default=list, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<ApprovalRule {self.name}>"

    @property
    def conditions(self) -> dict:
        """Conditions as a dict, omitting unset fields"""
        conditions = {
            "amount_gte": self.amount_gte,
            "category": self.category,
            "cost_center": self.cost_center,
        }
        return {key: value for key, value in conditions.items() if value is not None}
