"""
User Service
"""

from sqlalchemy.orm import Session
from typing import List

from procurement.models.user import User
from procurement.repositories.user_repository import UserRepository
from procurement.schemas.user import UserCreate
from procurement.utils.exceptions import ValidationError
from procurement.utils.security import get_password_hash
from procurement.utils.logger import setup_logger, log_audit

logger = setup_logger()


class UserService:
    """User accounts"""

    def list_users(self, db: Session) -> List[User]:
        return UserRepository(db).list()

    def create_user(self, db: Session, data: UserCreate, created_by: User) -> User:
        """
        Create a user account

        Raises:
            ValidationError: E-mail is already registered
        """
        repo = UserRepository(db)
        if repo.get_by_email(data.email):
            raise ValidationError("Email is already registered")

        user = User(
            email=data.email.lower(),
            full_name=data.full_name,
            hashed_password=get_password_hash(data.password),
            role=data.role,
            department=data.department,
            is_active=True
        )
        repo.save(user)
        repo.commit()
        db.refresh(user)

        log_audit(created_by.id, "create_user", f"{user.email} role={user.role.value}")
        logger.info(f"User created: {user.email}")
        return user


# Create singleton instance
user_service = UserService()
