import os

# must be set before foody.db builds its engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient

from foody.db import Base, SessionLocal, engine
from foody.main import app
from foody.menu import seed_foods


@pytest.fixture(autouse=True)
def _fresh_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def foods(db):
    return {f.name: f.id for f in seed_foods(db)}


def login(client, username="alice", password="pw1"):
    client.post("/auth/register", json={"username": username, "password": password})
    res = client.post("/auth/login", json={"username": username, "password": password})
    return res.json()["token"]


@pytest.fixture
def token(client):
    return login(client)


@pytest.fixture
def headers(token):
    return {"Authorization": f"Bearer {token}"}
