"""Shared fixtures for the ByteCourses test suite."""

import os
import tempfile

# Settings are read at import time; point them at a throwaway database first.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite:///{os.path.join(tempfile.mkdtemp(prefix='bytecourses-'), 'test.db')}",
)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from bytecourses.database.connection import build_engine, create_tables, get_db
from bytecourses.main import app
from bytecourses.repositories.memory import InMemoryCourseRepository, InMemoryProposalRepository
from bytecourses.repositories.sql import SqlCourseRepository, SqlProposalRepository
from bytecourses.services.course_service import CourseService
from bytecourses.services.proposal_service import ProposalService


@pytest.fixture
def session_factory(tmp_path):
    """Session factory bound to a fresh file-backed SQLite database."""
    engine = build_engine(f"sqlite:///{tmp_path / 'bytecourses.db'}")
    create_tables(engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    yield factory
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def service_factory(request, session_factory):
    """
    Build (ProposalService, CourseService) pairs over one shared store.

    Each call returns services with their own session, as separate requests
    would have, so threaded tests exercise the real concurrency guards.
    """
    if request.param == "memory":
        proposals = InMemoryProposalRepository()
        courses = InMemoryCourseRepository()

        def factory():
            return ProposalService(proposals, courses), CourseService(courses)

        yield factory
        return

    sessions = []

    def factory():
        db = session_factory()
        sessions.append(db)
        courses = SqlCourseRepository(db)
        return ProposalService(SqlProposalRepository(db), courses), CourseService(courses)

    yield factory

    for db in sessions:
        db.close()


@pytest.fixture
def services(service_factory):
    return service_factory()


@pytest.fixture
def client(session_factory):
    """API test client using the per-test database."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


