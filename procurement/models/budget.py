"""
Budget Model
Spending limit per cost center and period
"""

from sqlalchemy import Column, Integer, String, Float, DateTime
from datetime import datetime

from procurement.config.database import Base


class Budget(Base):
    """Budget model"""
    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    cost_center = Column(String, unique=True, index=True, nullable=False)
    amount = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False, default="IDR")
    period = Column(String, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Budget {self.name} ({self.cost_center})>"
