"""
Authentication Tests
Tests for login, current user, token refresh and user management
"""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from procurement.main import app
from procurement.config.database import Base, get_db
from procurement.database.setup_database import seed_demo_data
from procurement.models.user import User, UserRole
from procurement.utils.security import get_password_hash, create_access_token

# Test database
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEMO_PASSWORDS = {
    "employee@example.com": "employee123",
    "approver@example.com": "approver123",
    "procurement@example.com": "procurement123",
    "finance@example.com": "finance123",
}


def override_get_db():
    """Override database dependency for testing"""
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db
client = TestClient(app)


def login(email: str, password: str = None) -> dict:
    """Log in through the API and return bearer headers"""
    response = client.post(
        "/api/auth/login",
        data={
            "username": email,
            "password": password or DEMO_PASSWORDS[email]
        }
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture(scope="function")
def test_db():
    """Create test database"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded_db(test_db):
    """Test database loaded with the demo users, vendors, budgets, rules, requisitions, RFQs and POs"""
    db = TestingSessionLocal()
    seed_demo_data(db)
    db.close()


@pytest.fixture
def test_user(test_db):
    """Create a plain employee"""
    db = TestingSessionLocal()

    user = User(
        email="test@example.com",
        full_name="Test User",
        hashed_password=get_password_hash("testpass123"),
        role=UserRole.EMPLOYEE,
        department="Testing",
        is_active=True
    )

    db.add(user)
    db.commit()
    db.refresh(user)
    db.close()
    return user


@pytest.fixture
def employee_headers(seeded_db):
    return login("employee@example.com")


@pytest.fixture
def approver_headers(seeded_db):
    return login("approver@example.com")


@pytest.fixture
def procurement_headers(seeded_db):
    return login("procurement@example.com")


@pytest.fixture
def finance_headers(seeded_db):
    return login("finance@example.com")


class TestAuthentication:
    """Test authentication endpoints"""

    def test_login_wrong_password(self, test_user):
        """Test login with wrong password"""
        response = client.post(
            "/api/auth/login",
            data={
                "username": "test@example.com",
                "password": "wrongpassword"
            }
        )
        assert response.status_code == 401

    def test_login_nonexistent_user(self, test_db):
        """Test login with non-existent user"""
        response = client.post(
            "/api/auth/login",
            data={
                "username": "nobody@example.com",
                "password": "password123"
            }
        )
        assert response.status_code == 401

    def test_login_inactive_user(self, test_user):
        db = TestingSessionLocal()
        user = db.query(User).filter(User.email == "test@example.com").first()
        user.is_active = False
        db.commit()
        db.close()

        response = client.post(
            "/api/auth/login",
            data={"username": "test@example.com", "password": "testpass123"}
        )
        assert response.status_code == 401

    def test_unauthorized_access(self, test_db):
        """Test accessing protected endpoint without token"""
        response = client.get("/api/auth/me")
        assert response.status_code == 401

    def test_invalid_token(self, test_db):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401

    def test_login_success(self, test_user):
        """Test successful login"""
        response = client.post(
            "/api/auth/login",
            data={
                "username": "test@example.com",
                "password": "testpass123"
            }
        )

        assert response.status_code == 200
        data = response.json()
        assert "access_token" in data
        assert "refresh_token" in data
        assert data["token_type"] == "bearer"

    def test_login_email_is_case_insensitive(self, test_user):
        response = client.post(
            "/api/auth/login",
            data={"username": "TEST@example.com", "password": "testpass123"}
        )
        assert response.status_code == 200

    def test_get_current_user(self, test_user):
        """Test getting current user info"""
        headers = login("test@example.com", "testpass123")

        response = client.get("/api/auth/me", headers=headers)
        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "test@example.com"
        assert data["role"] == "employee"
        assert "hashed_password" not in data

    def test_refresh_token(self, test_user):
        tokens = client.post(
            "/api/auth/login",
            data={"username": "test@example.com", "password": "testpass123"}
        ).json()

        response = client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert response.status_code == 200
        assert "access_token" in response.json()

    def test_access_token_cannot_refresh(self, test_user):
        token = create_access_token({"sub": str(test_user.id)})
        response = client.post("/api/auth/refresh", json={"refresh_token": token})
        assert response.status_code == 401


class TestUserManagement:
    """Test user listing and creation"""

    def test_list_users_as_approver(self, approver_headers):
        response = client.get("/api/users", headers=approver_headers)
        assert response.status_code == 200
        emails = [user["email"] for user in response.json()]
        assert "procurement@example.com" in emails
        assert len(emails) == 4

    def test_list_users_forbidden_for_employee(self, employee_headers):
        response = client.get("/api/users", headers=employee_headers)
        assert response.status_code == 403

    def test_create_user(self, procurement_headers):
        response = client.post(
            "/api/users",
            headers=procurement_headers,
            json={
                "email": "New.Buyer@Example.com",
                "full_name": "New Buyer",
                "password": "buyerpass123",
                "role": "finance",
                "department": "Finance"
            }
        )
        assert response.status_code == 201
        assert response.json()["email"] == "new.buyer@example.com"

        headers = login("new.buyer@example.com", "buyerpass123")
        me = client.get("/api/auth/me", headers=headers).json()
        assert me["role"] == "finance"

    def test_create_user_duplicate_email(self, procurement_headers):
        response = client.post(
            "/api/users",
            headers=procurement_headers,
            json={
                "email": "APPROVER@example.com",
                "full_name": "Second Approver",
                "password": "approverpass",
                "role": "approver"
            }
        )
        assert response.status_code == 422
        assert response.json()["message"] == "Email is already registered"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
