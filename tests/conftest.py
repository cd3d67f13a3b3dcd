import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from vetcare.api.deps import get_backend, get_directory
from vetcare.core.config import settings
from vetcare.core.redis import MemoryBackend
from vetcare.main import app
from vetcare.schemas.user import Identity
from vetcare.services.directory import MockUserDirectory

DEMO_PASSWORD = "123456"


@pytest.fixture
def memory_backend():
    return MemoryBackend()


@pytest.fixture(scope="session")
def mock_directory():
    # Hashing the demo password is slow on purpose; build it once
    return MockUserDirectory.from_file(settings.MOCK_USERS_FILE, DEMO_PASSWORD)


@pytest.fixture
def admin():
    return Identity(id="1", name="Laura Méndez", email="admin@vetcare.com", role="admin")


@pytest.fixture
def veterinarian():
    return Identity(id="2", name="Dr. Carlos Ruiz", email="vet@vetcare.com", role="veterinarian")


@pytest.fixture
def receptionist():
    return Identity(id="3", name="Ana Torres", email="reception@vetcare.com", role="receptionist")


@pytest.fixture
def client_user():
    return Identity(id="4", name="Miguel Sánchez", email="client@example.com", role="client")


@pytest_asyncio.fixture
async def client(memory_backend, mock_directory):
    app.dependency_overrides[get_backend] = lambda: memory_backend
    app.dependency_overrides[get_directory] = lambda: mock_directory
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    async def _login(email, password=DEMO_PASSWORD):
        response = await client.post("/api/v1/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}
    return _login
