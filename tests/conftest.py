"""Pytest configuration and fixtures."""

import os

# Set test environment variables before importing app modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from shipyard.database import Base, SessionLocal, engine
from shipyard.main import app
import shipyard.models  # noqa: F401


SIGN_UP = """
mutation SignUp($name: String!, $email: String!, $password: String!) {
    signUp(name: $name, email: $email, password: $password) { ok }
}
"""

SIGN_IN = """
mutation SignIn($email: String!, $password: String!) {
    signIn(email: $email, password: $password) { ok requiresTOTP }
}
"""

ME = """
query Me {
    me { id name email hasTOTP }
}
"""


@pytest.fixture
def db_setup():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(db_setup):
    """Database session for arranging and inspecting rows."""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def make_client(db_setup):
    """Build independent clients; each one keeps its own session cookie."""
    def factory() -> TestClient:
        return TestClient(app)
    return factory


@pytest.fixture
def client(make_client):
    return make_client()


def execute(client: TestClient, query: str, **variables) -> dict:
    """POST a GraphQL operation and return the decoded body."""
    response = client.post("/graphql", json={"query": query, "variables": variables})
    return response.json()


def error_messages(result: dict) -> list:
    return [error["message"] for error in result.get("errors") or []]


@pytest.fixture
def graphql(client):
    def run(query: str, **variables) -> dict:
        return execute(client, query, **variables)
    return run


@pytest.fixture
def sign_up():
    """Register an account on a client, leaving that client signed in."""
    def register(client, name="Ada Lovelace", email="ada@example.com", password="correct-horse"):
        result = execute(client, SIGN_UP, name=name, email=email, password=password)
        assert result.get("errors") is None, result
        return execute(client, ME)["data"]["me"]
    return register


@pytest.fixture
def user(client, sign_up):
    """The default account, signed in on `client`."""
    return sign_up(client)
