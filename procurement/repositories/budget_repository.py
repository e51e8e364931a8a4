"""
Budget Repository
"""

from typing import List, Optional

from procurement.models.budget import Budget
from procurement.repositories.base import BaseRepository


class BudgetRepository(BaseRepository[Budget]):
    """Budget persistence"""

    model = Budget

    def list(self) -> List[Budget]:
        return self.db.query(Budget).order_by(Budget.id.asc()).all()

    def get_by_cost_center(self, cost_center: str) -> Optional[Budget]:
        return self.db.query(Budget).filter(Budget.cost_center == cost_center).first()
