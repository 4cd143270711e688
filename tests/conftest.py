import os
import sys

# Settings are read at import time, so the environment must be in place first.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("LOG_TO_FILE", "false")

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import uuid
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models.registry  # noqa: F401
from app.core.constants import UserRoleEnum
from app.core.database import Base, enable_sqlite_foreign_keys, get_db
from app.models.organization import Organization
from app.models.user import User
import main


@pytest.fixture(scope="function")
def database_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(database_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()


@pytest.fixture(scope="function")
def client(db_session):
    main.app.dependency_overrides[get_db] = lambda: db_session
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()


@pytest.fixture
def org_factory(db_session):
    def _create(name: str = None) -> Organization:
        org_id = uuid.uuid4()
        slug = f"org-{org_id.hex[:8]}"
        org = Organization(id=org_id, organization_id=org_id, name=name or slug, slug=slug)
        db_session.add(org)
        db_session.commit()
        db_session.refresh(org)
        return org
    return _create


@pytest.fixture
def user_factory(db_session):
    def _create(org: Organization = None, role: UserRoleEnum = UserRoleEnum.STUDENT, email: str = None) -> User:
        user = User(
            id=uuid.uuid4(),
            first_name="Test",
            last_name=role.value.replace("_", " ").title(),
            email=email or f"{role.value}-{uuid.uuid4().hex[:8]}@test.com",
            role=role,
            organization_id=org.id if org else None,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _create


@pytest.fixture
def org_a(org_factory):
    return org_factory("Org A")


@pytest.fixture
def org_b(org_factory):
    return org_factory("Org B")


@pytest.fixture
def instructor_a(user_factory, org_a):
    return user_factory(org_a, UserRoleEnum.INSTRUCTOR)


@pytest.fixture
def student_a(user_factory, org_a):
    return user_factory(org_a, UserRoleEnum.STUDENT)


@pytest.fixture
def org_admin_a(user_factory, org_a):
    return user_factory(org_a, UserRoleEnum.ORG_ADMIN)


@pytest.fixture
def instructor_b(user_factory, org_b):
    return user_factory(org_b, UserRoleEnum.INSTRUCTOR)


@pytest.fixture
def student_b(user_factory, org_b):
    return user_factory(org_b, UserRoleEnum.STUDENT)


@pytest.fixture
def system_admin(user_factory):
    return user_factory(None, UserRoleEnum.SYSTEM_ADMIN)
