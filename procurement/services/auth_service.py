"""
Authentication Service
Handles user authentication and authorization
"""

from datetime import datetime
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from procurement.config.database import get_db
from procurement.models.user import User
from procurement.repositories.user_repository import UserRepository
from procurement.utils.security import verify_password, create_access_token, create_refresh_token, decode_token
from procurement.utils.logger import setup_logger

logger = setup_logger()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


class AuthService:
    """Authentication service"""

    def authenticate_user(self, db: Session, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with e-mail and password

        Args:
            db: Database session
            email: Login e-mail (case-insensitive)
            password: Password

        Returns:
            User: Authenticated user or None
        """
        user = UserRepository(db).get_by_email(email)

        if not user:
            return None

        if not verify_password(password, user.hashed_password):
            return None

        if not user.is_active:
            return None

        user.last_login = datetime.utcnow()
        db.commit()

        logger.info(f"User authenticated: {user.email}")
        return user

    def create_tokens(self, user: User) -> dict:
        """
        Create access and refresh tokens for user

        Args:
            user: User object

        Returns:
            dict: Access and refresh tokens
        """
        access_token = create_access_token(
            data={
                "sub": str(user.id),
                "email": user.email,
                "role": user.role.value
            }
        )

        refresh_token = create_refresh_token(
            data={"sub": str(user.id)}
        )

        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer"
        }

    def refresh(self, db: Session, refresh_token: str) -> Optional[dict]:
        """
        Issue new tokens from a refresh token

        Returns:
            dict: New tokens, or None when the token or its user is invalid
        """
        payload = decode_token(refresh_token)
        if not payload or payload.get("type") != "refresh" or payload.get("sub") is None:
            return None

        user = UserRepository(db).get(int(payload["sub"]))
        if not user or not user.is_active:
            return None

        return self.create_tokens(user)

    async def get_current_user(
        self,
        token: str = Depends(oauth2_scheme),
        db: Session = Depends(get_db)
    ) -> User:
        """
        Get current authenticated user from token

        Args:
            token: JWT token
            db: Database session

        Returns:
            User: Current user

        Raises:
            HTTPException: If authentication fails
        """
        credentials_exception = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

        payload = decode_token(token)
        if payload is None or payload.get("type") != "access":
            raise credentials_exception

        user_id: str = payload.get("sub")
        if user_id is None:
            raise credentials_exception

        user = UserRepository(db).get(int(user_id))
        if user is None:
            raise credentials_exception

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User account is inactive"
            )

        return user

    def require_permission(self, permission: str):
        """
        Dependency requiring a specific permission

        Args:
            permission: Required permission
        """
        async def permission_checker(current_user: User = Depends(self.get_current_user)):
            if not current_user.has_permission(permission):
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"Permission denied: {permission} required"
                )
            return current_user

        return permission_checker


# Create singleton instance
auth_service = AuthService()
