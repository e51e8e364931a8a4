"""
Vendor Service
"""

from sqlalchemy.orm import Session
from typing import List

from procurement.models.user import User
from procurement.models.vendor import Vendor
from procurement.repositories.vendor_repository import VendorRepository
from procurement.schemas.vendor import VendorCreate
from procurement.utils.exceptions import NotFoundError, ValidationError
from procurement.utils.logger import log_audit


class VendorService:
    """Vendor master data; names are unique regardless of case"""

    def list_vendors(self, db: Session) -> List[Vendor]:
        return VendorRepository(db).list()

    def get_vendor(self, db: Session, vendor_id: int) -> Vendor:
        vendor = VendorRepository(db).get(vendor_id)
        if not vendor:
            raise NotFoundError("Vendor not found")
        return vendor

    def create_vendor(self, db: Session, data: VendorCreate, user: User) -> Vendor:
        repo = VendorRepository(db)
        if repo.get_by_name(data.name):
            raise ValidationError("Vendor with this name already exists")

        vendor = Vendor(**data.model_dump())
        repo.save(vendor)
        repo.commit()
        db.refresh(vendor)

        log_audit(user.id, "create_vendor", vendor.name)
        return vendor

    def update_vendor(self, db: Session, vendor_id: int, data: VendorCreate, user: User) -> Vendor:
        repo = VendorRepository(db)
        vendor = self.get_vendor(db, vendor_id)

        existing = repo.get_by_name(data.name)
        if existing and existing.id != vendor.id:
            raise ValidationError("Vendor with this name already exists")

        for field, value in data.model_dump().items():
            setattr(vendor, field, value)
        repo.save(vendor)
        repo.commit()
        db.refresh(vendor)

        log_audit(user.id, "update_vendor", vendor.name)
        return vendor

    def delete_vendor(self, db: Session, vendor_id: int, user: User) -> str:
        repo = VendorRepository(db)
        vendor = self.get_vendor(db, vendor_id)
        name = vendor.name
        repo.delete(vendor)
        repo.commit()

        log_audit(user.id, "delete_vendor", name)
        return name


# Create singleton instance
vendor_service = VendorService()
