"""
Legal Estate - Test Configuration
Shared fixtures: a throwaway SQLite database, local document storage
and authenticated HTTP clients.
"""

import os
import tempfile

# Settings are read at import time, so configure before importing the app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_legal_estate.db"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="legal-estate-uploads-")
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["DEBUG"] = "true"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from legal_estate.core.security import create_access_token, get_password_hash
from legal_estate.db.database import Database
from legal_estate.db.models import User, UserRole
from legal_estate.main import app
from legal_estate.services.storage_service import LocalDocumentStorage

TEST_PASSWORD = "password123"


# =============================================================================
# Database / Storage
# =============================================================================

@pytest_asyncio.fixture
async def database(tmp_path):
    """Fresh database per test. ASGITransport skips the lifespan, so app state is set here."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_all()
    app.state.database = db
    yield db
    await db.dispose()


@pytest.fixture
def storage(tmp_path):
    store = LocalDocumentStorage(str(tmp_path / "uploads"))
    app.state.storage = store
    return store


# =============================================================================
# Users
# =============================================================================

async def make_user(database, email, role=UserRole.ATTORNEY, first_name="Test", last_name="User", active=True):
    async with database.transaction() as session:
        user = User(
            email=email,
            password_hash=get_password_hash(TEST_PASSWORD),
            first_name=first_name,
            last_name=last_name,
            role=role,
            is_active=active,
        )
        session.add(user)
    return user


@pytest_asyncio.fixture
async def attorney(database):
    return await make_user(database, "john.smith@legal-estate.com", first_name="John", last_name="Smith")


@pytest_asyncio.fixture
async def paralegal(database):
    return await make_user(
        database,
        "alexis.camacho@legal-estate.com",
        role=UserRole.PARALEGAL,
        first_name="Alexis",
        last_name="Camacho",
    )


def auth_headers(user) -> dict:
    token = create_access_token({"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# HTTP Clients
# =============================================================================

@pytest_asyncio.fixture
async def client(database, storage):
    """Unauthenticated client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def auth_client(database, storage, attorney):
    """Client signed in as the attorney."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", headers=auth_headers(attorney)) as ac:
        yield ac


# =============================================================================
# Records
# =============================================================================

@pytest.fixture
def headers_for():
    """Bearer headers for any user."""
    return auth_headers


@pytest.fixture
def new_client(auth_client):
    """Factory: POST a client and return the response body."""
    async def _create(first_name="Patricia", last_name="Thowerd", **extra):
        payload = {"firstName": first_name, "lastName": last_name, **extra}
        response = await auth_client.post("/api/v1/clients/", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def new_case(auth_client):
    """Factory: POST a case for a client and return the response body."""
    async def _create(client_id, title="Thowerd v. Martinez", **extra):
        payload = {"title": title, "caseType": "AUTO_ACCIDENT", "clientId": client_id, **extra}
        response = await auth_client.post("/api/v1/cases/", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest_asyncio.fixture
async def sample_client(new_client):
    return await new_client()


@pytest_asyncio.fixture
async def sample_case(new_case, sample_client):
    return await new_case(sample_client["id"], dateOfLoss="2015-09-20")


@pytest.fixture
def user_factory(database):
    """Factory: insert a staff user directly."""
    async def _create(email, **kwargs):
        return await make_user(database, email, **kwargs)
    return _create
