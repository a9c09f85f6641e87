import pytest
from httpx import ASGITransport, AsyncClient

from identity_api.config import Settings
from identity_api.db import Database
from identity_api.infrastructure.repositories import SqlAlchemyUserRepository
from identity_api.services.identity_service import IdentityService
from identity_api.services.token_service import TokenService
from identity_api.setup_db import create_all
from identity_api.utils.password import PasswordHasher

TEST_SECRET = "test_secret_key_123"
TEST_ISSUER = "identity-api-tests"
TEST_PASSWORD = "SecurePass123!"

# keep hashing cheap in tests; the scheme and code path are the same
TEST_HASH_ROUNDS = 1000


@pytest.fixture
def database_url(tmp_path):
    """Return a sqlite+aiosqlite URL backed by a per-test file in pytest's tmp_path."""
    db_file = tmp_path / "test.db"
    # Use POSIX path so SQLAlchemy parses correctly on Windows
    return f"sqlite+aiosqlite:///{db_file.as_posix()}"


@pytest.fixture
def settings(database_url):
    return Settings(
        database_url=database_url,
        jwt_secret=TEST_SECRET,
        jwt_issuer=TEST_ISSUER,
        jwt_token_lifetime=60 * 60 * 1000,
        password_hash_rounds=TEST_HASH_ROUNDS,
    )


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=TEST_HASH_ROUNDS)


@pytest.fixture
def token_service():
    return TokenService(TEST_SECRET, TEST_ISSUER, token_lifetime_ms=60 * 60 * 1000)


@pytest.fixture
async def database(settings):
    """A connected Database with the schema created; disconnected after the test."""
    db = Database(settings)
    await db.connect()
    await create_all(db)
    try:
        yield db
    finally:
        await db.disconnect()


@pytest.fixture
def user_repo(database):
    return SqlAlchemyUserRepository(database.session_factory)


@pytest.fixture
def identity_service(user_repo, hasher, token_service):
    return IdentityService(user_repo, hasher, token_service)


@pytest.fixture
def test_app(settings, database, hasher):
    """FastAPI app wired to the per-test database.

    ASGITransport does not run startup hooks, so the database fixture is
    connected up front and handed to create_app.
    """
    from identity_api.wiring import create_app

    return create_app(settings, database=database, password_hasher=hasher)


@pytest.fixture
async def http(test_app):
    async with AsyncClient(
        transport=ASGITransport(app=test_app), base_url="http://testserver"
    ) as client:
        yield client


async def register_user(
    http_client,
    email: str = "alice@example.com",
    password: str = TEST_PASSWORD,
    first_name: str = "Alice",
    last_name: str = "Liddell",
):
    return await http_client.post(
        "/auth/register",
        json={
            "email": email,
            "firstName": first_name,
            "lastName": last_name,
            "password": password,
        },
    )


async def login_token(http_client, email: str = "alice@example.com", password: str = TEST_PASSWORD):
    r = await http_client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["token"]


@pytest.fixture
def register():
    return register_user


@pytest.fixture
def login():
    return login_token
