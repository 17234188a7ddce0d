"""Handler test fixtures: RouteContext over fresh static market data and registry."""

import pytest

from reflect_mirror.config import Settings
from reflect_mirror.infrastructure.integration_registry import InMemoryIntegrationRegistry
from reflect_mirror.infrastructure.static_market_data import StaticMarketData
from reflect_mirror.services.route_context import RouteContext


@pytest.fixture
def ctx():
    settings = Settings(_env_file=None, max_whitelist_batch=2, max_whitelisted_users=3)
    return RouteContext(
        settings=settings,
        market=StaticMarketData(),
        store=InMemoryIntegrationRegistry(settings.api_key_prefix),
    )
