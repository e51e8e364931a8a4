"""
Purchase Order Repository
"""

from typing import Iterable, List

from procurement.models.purchase_order import PurchaseOrder, POStatus
from procurement.repositories.base import BaseRepository


class PurchaseOrderRepository(BaseRepository[PurchaseOrder]):
    """Purchase order persistence"""

    model = PurchaseOrder

    def list_by_status(self, statuses: Iterable[POStatus]) -> List[PurchaseOrder]:
        return (
            self.db.query(PurchaseOrder)
            .filter(PurchaseOrder.status.in_(list(statuses)))
            .all()
        )

    def all_numbers(self) -> List[str]:
        return [row[0] for row in self.db.query(PurchaseOrder.po_no).all()]
