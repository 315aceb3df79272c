import os

# Must be set before the app modules create their engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("AUTH_JWT_SECRET", "test-secret")
os.environ.setdefault("LOG_FORMAT", "text")

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token
from app.db.init_db import drop_db, init_db
from app.db.session import SessionLocal, engine, get_db
from app.main import app
from app.models.base.enums import UserRole
from app.models.organization import Church, Diocese, SchoolClass
from app.models.user import User
from app.repositories.announcement import (
    AnnouncementRepository,
    AnnouncementScopeRepository,
    AnnouncementViewRepository,
)
from app.services.announcement import (
    AnnouncementService,
    AnnouncementTargetingService,
)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def db_session():
    init_db(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_db(engine)


@pytest.fixture
def legacy_session():
    """
    A store whose announcements table predates the deactivation columns.

    Holds one announcement, a-1, published 2024-01-01 to 2024-01-08.
    """
    legacy_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    with legacy_engine.begin() as conn:
        conn.execute(text(
            "CREATE TABLE announcements ("
            " id VARCHAR(36) PRIMARY KEY,"
            " title VARCHAR(255) NOT NULL,"
            " description TEXT,"
            " types JSON,"
            " target_roles JSON,"
            " publish_from DATETIME NOT NULL,"
            " publish_to DATETIME,"
            " is_deleted BOOLEAN NOT NULL DEFAULT 0,"
            " created_by VARCHAR(36),"
            " created_at DATETIME NOT NULL,"
            " updated_at DATETIME NOT NULL)"
        ))
        conn.execute(text(
            "INSERT INTO announcements (id, title, types, target_roles, publish_from,"
            " publish_to, is_deleted, created_at, updated_at) VALUES ('a-1', 'Legacy',"
            " '[]', '[\"student\"]', '2024-01-01 00:00:00', '2024-01-08 00:00:00', 0,"
            " '2024-01-01 00:00:00', '2024-01-01 00:00:00')"
        ))
    # Scope, organisation and view tables; the legacy announcements table is kept
    init_db(legacy_engine)

    session = sessionmaker(bind=legacy_engine)()
    try:
        yield session
    finally:
        session.close()
        legacy_engine.dispose()


@pytest.fixture
def catalog(db_session):
    """
    Two dioceses, three churches, three classes:

        d-north: c-mark (k-grade1, k-grade2), c-luke
        d-south: c-paul (k-youth)
    """
    db_session.add_all([
        Diocese(id="d-north", name="Diocese North"),
        Diocese(id="d-south", name="Diocese South"),
    ])
    db_session.flush()
    db_session.add_all([
        Church(id="c-mark", name="St Mark", diocese_id="d-north"),
        Church(id="c-luke", name="St Luke", diocese_id="d-north"),
        Church(id="c-paul", name="St Paul", diocese_id="d-south"),
    ])
    db_session.flush()
    db_session.add_all([
        SchoolClass(id="k-grade1", name="Grade 1", church_id="c-mark"),
        SchoolClass(id="k-grade2", name="Grade 2", church_id="c-mark"),
        SchoolClass(id="k-youth", name="Youth", church_id="c-paul"),
    ])
    db_session.commit()
    return AnnouncementScopeRepository(db_session).load_catalog()


@pytest.fixture
def users(db_session, catalog):
    people = {
        "admin": User(id="u-admin", full_name="Admin", role=UserRole.SUPER_ADMIN),
        "teacher": User(
            id="u-teacher", full_name="Teacher", role=UserRole.TEACHER,
            diocese_id="d-north", church_id="c-mark", class_id="k-grade1",
        ),
        "student": User(
            id="u-student", full_name="Student One", role=UserRole.STUDENT,
            diocese_id="d-north", church_id="c-mark", class_id="k-grade1",
        ),
        "luke_student": User(
            id="u-luke", full_name="Student Two", role=UserRole.STUDENT,
            diocese_id="d-north", church_id="c-luke",
        ),
        "south_student": User(
            id="u-south", full_name="Student Three", role=UserRole.STUDENT,
            diocese_id="d-south", church_id="c-paul", class_id="k-youth",
        ),
        "parent": User(
            id="u-parent", full_name="Parent", role=UserRole.PARENT,
            diocese_id="d-north", church_id="c-mark", class_id="k-grade2",
        ),
    }
    db_session.add_all(people.values())
    db_session.commit()
    return people


@pytest.fixture
def announcement_factory(db_session):
    """Insert an announcement row directly, optionally with scope rows."""

    def _create(scope=None, **fields):
        data = {
            "title": "Announcement",
            "publish_from": utc(2024, 1, 1),
            "target_roles": ["student", "parent"],
        }
        data.update(fields)
        entity = AnnouncementRepository(db_session).create_announcement(data)
        if scope:
            AnnouncementScopeRepository(db_session).replace_scope(
                entity.id,
                scope.get("diocese_ids", []),
                scope.get("church_ids", []),
                scope.get("class_ids", []),
            )
        return entity

    return _create


@pytest.fixture
def announcement_service(db_session):
    return AnnouncementService(AnnouncementRepository(db_session), db_session)


@pytest.fixture
def targeting_service(db_session):
    return AnnouncementTargetingService(
        AnnouncementRepository(db_session),
        db_session,
        view_repository=AnnouncementViewRepository(db_session),
    )


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers


@pytest.fixture
def client(db_session):
    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

