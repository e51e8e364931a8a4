"""
Vendor Repository
"""

from typing import List, Optional
from sqlalchemy import func

from procurement.models.vendor import Vendor
from procurement.repositories.base import BaseRepository


class VendorRepository(BaseRepository[Vendor]):
    """Vendor persistence"""

    model = Vendor

    def list(self) -> List[Vendor]:
        return self.db.query(Vendor).order_by(Vendor.name.asc()).all()

    def get_by_name(self, name: str) -> Optional[Vendor]:
        return self.db.query(Vendor).filter(func.lower(Vendor.name) == name.lower()).first()

    def get_by_email(self, email: str) -> Optional[Vendor]:
        return self.db.query(Vendor).filter(func.lower(Vendor.email) == email.lower()).first()
