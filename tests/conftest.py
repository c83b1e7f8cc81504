# tests/conftest.py

import itertools
import os

# Must be set before tracker.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CACHE_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from tracker.core.jwt import create_access_token
from tracker.core.security import hash_password
from tracker.core.storage import get_storage
from tracker.db.base import Base
from tracker.db.session import engine, SessionLocal, get_db
from tracker.main import app
from tracker.modules import User, UserRole, Task, TaskAssignment, TaskStatus

from .fakes import FakeStorage

PASSWORD = "secret123"
# bcrypt is slow on purpose; hash once for every fixture user
PASSWORD_HASH = hash_password(PASSWORD)


def auth_headers(user: User) -> dict:
    token = create_access_token({"sub": str(user.id), "type": "access"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture()
def client(db, storage):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    counter = itertools.count(1)

    def _make(
        first_name: str = "User",
        last_name: str | None = None,
        role: str = UserRole.USER,
        email: str | None = None,
        is_active: bool = True,
    ) -> User:
        n = next(counter)
        user = User(
            first_name=first_name,
            last_name=last_name or f"Number{n}",
            email=email or f"user{n}@example.com",
            hashed_password=PASSWORD_HASH,
            role=role,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture()
def admin(make_user) -> User:
    return make_user(first_name="Ada", last_name="Admin", role=UserRole.ADMIN, email="admin@example.com")


@pytest.fixture()
def user(make_user) -> User:
    return make_user(first_name="Bob", last_name="Builder", email="bob@example.com")


@pytest.fixture()
def make_task(db, admin):
    def _make(
        title: str = "Write the parser",
        status: TaskStatus = TaskStatus.UNASSIGNED,
        assignees: tuple = (),
    ) -> Task:
        task = Task(title=title, description="Details", status=status, created_by=admin.id)
        for assignee in assignees:
            task.assignments.append(TaskAssignment(user_id=assignee.id))
        db.add(task)
        db.commit()
        db.refresh(task)
        return task

    return _make
