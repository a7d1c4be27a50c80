"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Sample job records
"""

import os

# Point the application at SQLite before anything imports the settings
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite://")
os.environ.setdefault("DB_CONNECT_MAX_ATTEMPTS", "1")
os.environ.setdefault("DB_CONNECT_RETRY_DELAY", "0")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobboard.core.database import Base, get_db
from jobboard.models.job import Job
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_job_data():
    """Sample job payload for the create/update endpoints"""
    return {
        "title": "Line Cook",
        "employer": "Fast Food Restaurant",
        "location": "Mall Area",
        "salary": 16.50,
        "description": "Line cook position with flexible hours and team environment"
    }


@pytest.fixture
def add_job(db_session):
    """
    Insert a job row directly, bypassing the API so posted_date can be chosen.
    """
    def _add(posted_date: date = None, **fields):
        data = {
            "title": "Cashier",
            "employer": "Local Grocery Store",
            "location": "Downtown",
            "salary": 15.00,
            "description": "Part-time cashier position",
        }
        data.update(fields)
        job = Job(**data, posted_date=posted_date or date.today())
        db_session.add(job)
        db_session.commit()
        db_session.refresh(job)
        return job

    return _add
