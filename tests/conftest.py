"""
Shared fixtures: in-memory SQLite database, users with tokens, and a fake
resume uploader.
"""
import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobboard.main import app
from jobboard.db.base import Base
from jobboard.db import models  # noqa: F401
from jobboard.db.models.user import User
from jobboard.db.session import get_db
from jobboard.core.security import hash_password, create_access_token
from jobboard.services.media_service import get_resume_uploader


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override get_db dependency for testing."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


class FakeUploader:
    """Records uploads and answers with a predictable URL."""

    def __init__(self, url="https://res.cloudinary.com/demo/image/upload/resumes/resume.jpg"):
        self.url = url
        self.calls = []

    def upload_image(self, data, folder):
        self.calls.append((data, folder))
        return self.url


@pytest.fixture(scope="function", autouse=True)
def setup_db():
    """Create and drop tables for each test."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def client(uploader):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_resume_uploader] = lambda: uploader
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """Provide a database session for tests."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


def make_user(db, username):
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password("testpass123"),
        profile_picture=f"https://example.com/{username}.png",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': user.id})}"}


@pytest.fixture
def employer(db_session):
    return make_user(db_session, "employer")


@pytest.fixture
def seeker(db_session):
    return make_user(db_session, "seeker")


@pytest.fixture
def other_seeker(db_session):
    return make_user(db_session, "other_seeker")


@pytest.fixture
def job_payload():
    return {
        "title": "Backend Eng",
        "role": "Engineering",
        "category": "Software",
        "company_name": "Acme",
        "description": "Build and run our APIs.",
        "employment_type": "fulltime",
        "salary_range": {"min": 1000, "max": 2000},
        "skills_required": ["Python", "SQL"],
    }


@pytest.fixture
def created_job(client, employer, job_payload):
    response = client.post("/jobs", json=job_payload, headers=auth_headers(employer))
    assert response.status_code == 201
    return response.json()["job"]


def image_bytes(size=(1200, 800), fmt="PNG", color=(200, 30, 30)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()
