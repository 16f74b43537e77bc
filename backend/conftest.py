import os
import tempfile

import pytest

# Point the app at a throwaway SQLite file before config is imported.
_tmp_dir = tempfile.mkdtemp(prefix="habit-points-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp_dir, 'test.db')}"
os.environ["JWT_SECRET"] = "test-secret"

from database import Base, SessionLocal, engine  # noqa: E402
import models  # noqa: E402,F401


@pytest.fixture
def tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(tables):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    from auth import hash_password
    from models.user import User

    u = User(username="alice", hashed_password=hash_password("secret"))
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture
def client(tables):
    from fastapi.testclient import TestClient
    from main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers(client):
    resp = client.post("/api/v1/auth/register", json={"username": "bob", "password": "hunter2"})
    token = resp.json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}
