"""
Requisition Repository
"""

from typing import Iterable, List, Optional, Tuple
from datetime import datetime
from sqlalchemy import or_

from procurement.models.requisition import Requisition, RequisitionStatus
from procurement.repositories.base import BaseRepository


SORTABLE_FIELDS = {
    "created_at": Requisition.created_at,
    "total": Requisition.total,
    "req_no": Requisition.req_no,
    "department": Requisition.department,
    "cost_center": Requisition.cost_center,
    "status": Requisition.status,
    "needed_by": Requisition.needed_by,
}


class RequisitionRepository(BaseRepository[Requisition]):
    """Requisition persistence"""

    model = Requisition

    def list_by_cost_center(
        self,
        cost_center: str,
        statuses: Iterable[RequisitionStatus] = None
    ) -> List[Requisition]:
        query = self.db.query(Requisition).filter(Requisition.cost_center == cost_center)
        if statuses is not None:
            query = query.filter(Requisition.status.in_(list(statuses)))
        return query.all()

    def list_by_status(self, status: RequisitionStatus) -> List[Requisition]:
        return (
            self.db.query(Requisition)
            .filter(Requisition.status == status)
            .order_by(Requisition.created_at.desc())
            .all()
        )

    def get_many(self, ids: Iterable[int]) -> List[Requisition]:
        ids = list(ids)
        if not ids:
            return []
        return self.db.query(Requisition).filter(Requisition.id.in_(ids)).all()

    def all_numbers(self) -> List[str]:
        return [row[0] for row in self.db.query(Requisition.req_no).all()]

    def search(
        self,
        status: Optional[RequisitionStatus] = None,
        requester_id: Optional[int] = None,
        search: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        sort_by: str = "created_at",
        sort_dir: str = "desc",
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Requisition], int]:
        """
        Filter, sort and page requisitions

        Returns:
            Tuple of (page of requisitions, total matching count)
        """
        query = self.db.query(Requisition)

        if status:
            query = query.filter(Requisition.status == status)
        if requester_id:
            query = query.filter(Requisition.requester_id == requester_id)
        if search:
            term = f"%{search.lower()}%"
            query = query.filter(
                or_(
                    Requisition.req_no.ilike(term),
                    Requisition.department.ilike(term),
                    Requisition.cost_center.ilike(term)
                )
            )
        if date_from:
            query = query.filter(Requisition.created_at >= date_from)
        if date_to:
            query = query.filter(Requisition.created_at <= date_to)

        total = query.count()

        column = SORTABLE_FIELDS.get(sort_by, Requisition.created_at)
        query = query.order_by(column.asc() if sort_dir == "asc" else column.desc())

        return query.offset(skip).limit(limit).all(), total
