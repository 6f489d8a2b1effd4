import pytest
from httpx import AsyncClient, ASGITransport

from portal_auth.api.deps import get_idp_provider
from portal_auth.config import Settings
from portal_auth.core.auth.credentials import CredentialProvider
from portal_auth.main import app
from tests.mocks import FakeIdP

IDP_URL = "https://idp.test/oauth2"

@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"

@pytest.fixture
def idp_settings():
    """
    Settings pointing at the fake IdP, isolated from any local .env file.
    """
    return Settings(
        _env_file=None,
        IDP_URL=IDP_URL,
        IDP_ADMIN_USER="admin",
        IDP_ADMIN_PASSWORD="admin-password",
        CALLBACK_URL="https://portal.test/auth",
        APPLICATION_NAME="observability-portal",
        PLATFORM_CLIENT_ID="observability-portal-client",
    )

@pytest.fixture
def fake_idp():
    return FakeIdP()

@pytest.fixture
def provider(idp_settings, fake_idp):
    http_client = fake_idp.client()
    yield CredentialProvider(settings=idp_settings, http_client=http_client)
    http_client.close()

@pytest.fixture
async def client(provider):
    """
    API client wired to a provider that talks to the fake IdP.
    """
    app.dependency_overrides[get_idp_provider] = lambda: provider

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
