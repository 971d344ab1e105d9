"""
Pytest Configuration and Fixtures

Every test gets a fresh in-memory SQLite database; the API client shares
the test's session through a get_db override.
"""

import os
from datetime import date

# Keep the application engine off disk before app modules are imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app as fastapi_app
from app.models import Budget, Document, Issue, Project, Task


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


# =============================================================================
# Entity factories
# =============================================================================

@pytest.fixture
def make_project(db_session):
    def _make(name="Bridge Rehab", **fields):
        project = Project(name=name, **fields)
        db_session.add(project)
        db_session.commit()
        return project
    return _make


@pytest.fixture
def make_task(db_session):
    def _make(project, name="Excavation", **fields):
        task = Task(project_id=project.id, name=name, **fields)
        db_session.add(task)
        db_session.commit()
        return task
    return _make


@pytest.fixture
def make_budget(db_session):
    def _make(task, amount, type="budgeted", category="General", **fields):
        budget = Budget(task_id=task.id, amount=amount, type=type, category=category, **fields)
        db_session.add(budget)
        db_session.commit()
        return budget
    return _make


@pytest.fixture
def make_issue(db_session):
    def _make(project, status="open", date_reported=date(2024, 5, 1), description="Crack in slab"):
        issue = Issue(project_id=project.id, status=status, date_reported=date_reported, description=description)
        db_session.add(issue)
        db_session.commit()
        return issue
    return _make


@pytest.fixture
def make_document(db_session):
    def _make(project, file_type="pdf", created_at=None, file_name="plan"):
        document = Document(
            project_id=project.id,
            file_name=f"{file_name}.{file_type}",
            file_type=file_type,
            file_url=f"https://files.example.com/{file_name}.{file_type}",
        )
        if created_at is not None:
            document.created_at = created_at
        db_session.add(document)
        db_session.commit()
        return document
    return _make
