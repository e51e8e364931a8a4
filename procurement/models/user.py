"""
User Model
Represents system users with role-based access control
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from procurement.config.database import Base


class UserRole(str, enum.Enum):
    """User roles"""
    EMPLOYEE = "employee"
    APPROVER = "approver"
    PROCUREMENT_ADMIN = "procurement_admin"
    FINANCE = "finance"


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=False)
    hashed_password = Column(String, nullable=False)

    # Role and Department
    role = Column(Enum(UserRole), default=UserRole.EMPLOYEE, nullable=False)
    department = Column(String, nullable=True)

    is_active = Column(Boolean, default=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)

    # Relationships
    requisitions = relationship("Requisition", back_populates="requester")
    notifications = relationship("Notification", back_populates="user")

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"

    def has_permission(self, permission: str) -> bool:
        """Check if user has specific permission"""
        permission_map = {
            "manage_requisitions": self.role == UserRole.PROCUREMENT_ADMIN,
            "manage_approval_rules": self.role == UserRole.PROCUREMENT_ADMIN,
            "manage_vendors": self.role in [UserRole.PROCUREMENT_ADMIN, UserRole.APPROVER],
            "manage_users": self.role in [UserRole.PROCUREMENT_ADMIN, UserRole.APPROVER],
            "create_rfq": self.role in [UserRole.PROCUREMENT_ADMIN, UserRole.APPROVER],
            "create_po": self.role in [UserRole.PROCUREMENT_ADMIN, UserRole.APPROVER],
            "update_po": self.role in [UserRole.PROCUREMENT_ADMIN, UserRole.FINANCE],
        }
        return self.is_active and permission_map.get(permission, False)
