# flake8: noqa
import sys
from pathlib import Path

# Ensure project root is on sys.path so `cookbook` can be imported when tests are run
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))  # noqa: E402

import pytest
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cookbook import app as app_module
from cookbook import models  # noqa: F401
from cookbook.db import Base, make_engine


SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
# Use StaticPool so the same in-memory database is shared across connections
engine = make_engine(SQLALCHEMY_DATABASE_URL, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app_module.app.dependency_overrides[app_module.get_db] = override_get_db


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app_module.app)


@pytest.fixture
def db():
    # close before making HTTP calls: the in-memory database has one connection
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def signup(client, email, password="secret1"):
    res = client.post("/auth/signup", json={"email": email, "password": password})
    assert res.status_code == 201, res.text
    return res.json()


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def recipe_body(**overrides):
    body = {
        "name": "Soup",
        "ingredients": [{"name": "Salt", "measure": "1tsp"}],
        "steps": [{"order": 1, "description": "Boil"}],
        "tags": ["easy"],
    }
    body.update(overrides)
    return body


@pytest.fixture
def alice(client):
    return bearer(signup(client, "alice@mail.com")["token"])


@pytest.fixture
def bob(client):
    return bearer(signup(client, "bob@mail.com")["token"])
