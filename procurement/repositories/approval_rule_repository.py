"""
Approval Rule Repository
"""

from typing import List

from procurement.models.approval_rule import ApprovalRule
from procurement.repositories.base import BaseRepository


class ApprovalRuleRepository(BaseRepository[ApprovalRule]):
    """Approval rule persistence"""

    model = ApprovalRule

    def list(self) -> List[ApprovalRule]:
        # Newest rules first
        return self.db.query(ApprovalRule).order_by(ApprovalRule.id.desc()).all()
