import os

os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from friendgraph.api.auth.utils import create_access_token
from friendgraph.api.friends.models import Friendship
from friendgraph.api.users.models import User
from friendgraph.database.database import Base, get_db
from friendgraph.main import app


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
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def users(db_session):
    """alice, bob and carol, committed and ready to use."""
    created = {
        username: User(username=username, name=username.title(), hashed_password="not-a-real-hash")
        for username in ("alice", "bob", "carol")
    }
    db_session.add_all(created.values())
    db_session.commit()
    return created


@pytest.fixture
def edges(db_session):
    """Returns the current friendship table as a set of (user_id, friend_user_id, status)."""
    def _edges():
        db_session.expire_all()
        return {
            (edge.user_id, edge.friend_user_id, edge.status)
            for edge in db_session.query(Friendship).all()
        }
    return _edges


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        token = create_access_token({"sub": user.username})
        return {"Authorization": f"Bearer {token}"}
    return _headers
