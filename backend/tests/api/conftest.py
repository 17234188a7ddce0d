"""API test fixtures: isolated app + httpx client per test.

Invariants:
    - Every test gets fresh AppServices (empty registry), installed on app.state
      directly because ASGITransport does not run the lifespan
    - Settings are built without reading .env

Design Decisions:
    - create_app() per test instead of the module-level app: no state leaks between tests
"""

import pytest
from httpx import ASGITransport, AsyncClient

from reflect_mirror.config import Settings
from reflect_mirror.infrastructure.app_services import AppServices
from reflect_mirror.main import create_app

AUTHORITY = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"
SIGNER = "4Nd1mBQtrMJVYVfKf2PJy9NZUZdTAsp7D4xWLs4gDB4T"
OTHER_WALLET = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
async def services(settings):
    services = AppServices.create(settings)
    yield services
    await services.close()


@pytest.fixture
async def client(settings, services):
    """FastAPI test client over the full route table."""
    app = create_app(settings)
    app.state.services = services
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
async def integration(client) -> dict:
    """A freshly initialized rUSD integration (IntegrationConfig JSON)."""
    response = await client.post("/integrations/init", json={
        "authority": AUTHORITY, "name": "Acme Pay", "stablecoin": "rUSD",
        "feeBps": 25,
    })
    assert response.status_code == 200
    return response.json()["data"]
