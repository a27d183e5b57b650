#!/usr/bin/env python
"""
ABOUTME: Shared pytest fixtures for the forum API test suite
ABOUTME: Provides in-memory and PostgreSQL stores, service contexts, Flask app and signed-in clients
"""

import pytest

from core.context import AppConfig, ServiceContext
from core.postgres_database import PostgresDatabase, get_postgres_connection_string
from tests.fakes import InMemoryDatabase


@pytest.fixture
def test_config():
    """Testing configuration (never touches the environment's database settings)"""
    return AppConfig(database_url="postgresql://unused", environment="testing")


@pytest.fixture
def memory_db():
    """Fresh in-memory store per test"""
    return InMemoryDatabase()


@pytest.fixture
def service_context(test_config, memory_db):
    """Services wired around the in-memory store"""
    return ServiceContext.from_store(test_config, memory_db)


@pytest.fixture
def flask_app(service_context):
    """Flask app for API testing"""
    from forum_server import create_app

    return create_app(service_context)


@pytest.fixture
def api_client(flask_app):
    """Flask test client for API routes"""
    return flask_app.test_client()


def signup(client, username: str, password: str = "secret"):
    return client.post("/auth/signup", data={"username": username, "password": password})


@pytest.fixture
def alice_client(flask_app):
    """Test client holding alice's session cookie"""
    client = flask_app.test_client()
    response = signup(client, "alice")
    assert response.status_code == 201
    return client


@pytest.fixture
def bob_client(flask_app):
    """Second user's client sharing the same app and store"""
    client = flask_app.test_client()
    response = signup(client, "bob")
    assert response.status_code == 201
    return client


@pytest.fixture
def alice(service_context):
    """User record for service-level tests"""
    return service_context.users.signup("alice", "secret")


@pytest.fixture
def bob(service_context):
    return service_context.users.signup("bob", "secret")


@pytest.fixture
def sample_post(service_context, alice):
    return service_context.posts.create_post("Hi", "http://x", "body", alice)


# =============================================================================
# POSTGRESQL (skipped when no database is reachable)
# =============================================================================


@pytest.fixture(scope="session")
def postgres_connection_string():
    """Get PostgreSQL connection string for tests"""
    return get_postgres_connection_string()


@pytest.fixture(scope="module")
def postgres_db(postgres_connection_string):
    """PostgreSQL database for testing (module-scoped for performance)"""
    try:
        db = PostgresDatabase(postgres_connection_string, min_pool_size=1, max_pool_size=4, connection_timeout=3)
    except Exception as e:
        pytest.skip(f"PostgreSQL not available: {e}")

    if not db.health_check():
        db.cleanup()
        pytest.skip("PostgreSQL not available")

    yield db
    db.cleanup()


@pytest.fixture
def clean_database(postgres_db):
    """Empty every forum table before each test"""
    with postgres_db.pool.get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(
                "TRUNCATE comment_upvotes, post_upvotes, comments, posts, sessions, users RESTART IDENTITY CASCADE"
            )
        conn.commit()

    yield postgres_db
