"""
RFQ Repository
"""

from typing import List, Optional
from sqlalchemy import func

from procurement.models.rfq import RFQ
from procurement.repositories.base import BaseRepository


class RfqRepository(BaseRepository[RFQ]):
    """RFQ persistence"""

    model = RFQ

    def find_by_identifier(self, identifier: str) -> Optional[RFQ]:
        """Look up an RFQ by numeric id or RFQ number, case-insensitive"""
        normalized = identifier.strip().lower()
        if normalized.isdigit():
            rfq = self.get(int(normalized))
            if rfq:
                return rfq
        return self.db.query(RFQ).filter(func.lower(RFQ.rfq_no) == normalized).first()

    def all_numbers(self) -> List[str]:
        return [row[0] for row in self.db.query(RFQ.rfq_no).all()]
