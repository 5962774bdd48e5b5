"""
pytest Fixtures for Movie Reviews API Tests

This file contains shared fixtures used across all test files.

FIXTURE SCOPES:
- function (default): New instance per test function
- session: Single instance for entire test session

For database tests, we use:
- session scope for engine (expensive to create)
- function scope for sessions (isolation between tests)
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
# This disables rate limiting, sets a test secret key and keeps the
# application engine off PostgreSQL
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import Movie
from app.models.review import Review
from app.models.user import User, UserRole
from app.services.reviews import create_review
from app.services.security import hash_password

# =============================================================================
# DATABASE FIXTURES
# =============================================================================
# SQLite in-memory keeps the suite fast and self-contained.
# PostgreSQL-specific behaviour needs a real database and is not covered here.


@pytest.fixture(scope="session")
def engine():
    """
    Create a SQLite in-memory database engine.

    StaticPool keeps the connection alive for the entire session.
    Without it, SQLite in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    The session is bound to a connection whose transaction is rolled back
    after the test, so commits made by the code under test never leak
    into the next test.
    """
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )

    connection = engine.connect()
    transaction = connection.begin()
    session = TestSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    We override the get_db dependency to use our test session.
    """

    def override_get_db():
        """Provide test database session instead of real one."""
        try:
            yield db_session
        finally:
            pass  # Session cleanup handled by db_session fixture

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


def make_user(
    db_session: Session,
    username: str,
    password: str = "password123",
    role: UserRole = UserRole.USER,
) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        hashed_password=hash_password(password),
        role=role.value,
        is_active=True,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def sample_user(db_session: Session) -> User:
    """Create a sample user (password: password123)."""
    return make_user(db_session, "testuser")


@pytest.fixture
def second_user(db_session: Session) -> User:
    """Create a second user for testing ownership scenarios."""
    return make_user(db_session, "seconduser")


@pytest.fixture
def admin_user(db_session: Session) -> User:
    """Create an admin for testing catalog and moderation scenarios."""
    return make_user(db_session, "admin", password="adminpass123", role=UserRole.ADMIN)


@pytest.fixture
def sample_movie(db_session: Session, admin_user: User) -> Movie:
    """Create a movie without reviews."""
    movie = Movie(
        title="Inception",
        description="A thief who steals corporate secrets through dream-sharing technology.",
        release_year=2010,
        release_month=7,
        genres=["Action", "Science Fiction"],
        director="Christopher Nolan",
        cast=["Leonardo DiCaprio", "Elliot Page"],
        poster_url="https://example.com/posters/inception.jpg",
        created_by=admin_user.id,
    )
    db_session.add(movie)
    db_session.commit()
    db_session.refresh(movie)
    return movie


@pytest.fixture
def second_movie(db_session: Session, admin_user: User) -> Movie:
    """Create a second movie with a different genre."""
    movie = Movie(
        title="The Godfather",
        description="The aging patriarch of an organized crime dynasty transfers control.",
        release_year=1972,
        genres=["Crime", "Drama"],
        director="Francis Ford Coppola",
        cast=["Marlon Brando", "Al Pacino"],
        poster_url="https://example.com/posters/godfather.jpg",
        created_by=admin_user.id,
    )
    db_session.add(movie)
    db_session.commit()
    db_session.refresh(movie)
    return movie


@pytest.fixture
def sample_review(
    db_session: Session,
    sample_movie: Movie,
    sample_user: User,
) -> Review:
    """
    Create a rating-4 review by sample_user.

    Goes through the review service so the movie aggregates are current.
    """
    return create_review(
        db_session,
        movie_id=sample_movie.id,
        user_id=sample_user.id,
        rating=4,
        comment="Clever, layered and loud in the best way.",
    )
