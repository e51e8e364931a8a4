"""
Budget Schemas
"""

from pydantic import BaseModel


class BudgetSummaryResponse(BaseModel):
    """Budget with committed usage and what is left of it"""
    id: int
    name: str
    cost_center: str
    amount: float
    currency: str
    period: str
    usage: float
    remaining: float
