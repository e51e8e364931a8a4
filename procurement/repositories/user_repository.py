"""
User Repository
"""

from typing import List, Optional
from sqlalchemy import func

from procurement.models.user import User, UserRole
from procurement.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User persistence"""

    model = User

    def list(self) -> List[User]:
        return self.db.query(User).order_by(User.id.asc()).all()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(func.lower(User.email) == email.lower()).first()

    def list_active_by_role(self, role: UserRole) -> List[User]:
        return (
            self.db.query(User)
            .filter(User.role == role, User.is_active == True)  # noqa: E712
            .all()
        )
