import os
import tempfile

# Settings are read at import time, so point them at a throwaway database first
_TEST_DIR = tempfile.mkdtemp(prefix="letschat-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DIR, 'app.db')}"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["FIREBASE_ENABLED"] = "false"
os.environ["EMAIL_PROVIDER"] = "logging"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.crud.friends import FriendsCRUD
from app.database import Base, build_engine, get_db
from app.models import User
from app.services.friends_service import FriendsService


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'friends.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return FriendsCRUD(db)


@pytest.fixture
def service(store):
    return FriendsService(store)


@pytest.fixture
def make_user(db):
    """Create and commit a user; onboarded unless told otherwise."""
    counter = {"n": 0}

    def _make_user(name=None, is_onboarded=True, **fields):
        counter["n"] += 1
        name = name or f"user{counter['n']}"
        user = User(
            id=fields.pop("id", name),
            email=fields.pop("email", f"{name}@mailbox.org"),
            full_name=fields.pop("full_name", name.title()),
            native_language=fields.pop("native_language", "english"),
            learning_language=fields.pop("learning_language", "spanish"),
            is_onboarded=is_onboarded,
            **fields
        )
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture
def client(session_factory):
    from app.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth_headers(user_id: str) -> dict:
    return {"X-User-ID": user_id}
