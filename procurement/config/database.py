"""
Database Configuration
SQLAlchemy engine, session factory and declarative base
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from procurement.config.settings import settings


def build_engine(database_url: str):
    """
    Create an engine for the given URL

    SQLite connections are shared across threads; an in-memory SQLite
    database is pinned to a single connection so every session sees it.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)

    if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool
        )

    return create_engine(database_url, connect_args={"check_same_thread": False})


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency yielding a database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
