"""App Services: the process-wide collaborators handlers reach through RouteContext.

Invariants:
    - Created once in the lifespan and closed at shutdown
    - Handlers never construct their own store or market source

Design Decisions:
    - Plain dataclass container instead of a DI framework; tests build their own
      instance and install it on app.state
"""

import logging
from dataclasses import dataclass

from reflect_mirror.config import Settings
from reflect_mirror.core.repository_protocols import IntegrationStore, MarketDataSource
from reflect_mirror.infrastructure.integration_registry import InMemoryIntegrationRegistry
from reflect_mirror.infrastructure.static_market_data import StaticMarketData

logger = logging.getLogger(__name__)


@dataclass
class AppServices:
    settings: Settings
    market: MarketDataSource
    store: IntegrationStore

    @classmethod
    def create(cls, settings: Settings) -> "AppServices":
        logger.info("Initializing static market data and integration registry")
        return cls(
            settings=settings,
            market=StaticMarketData(),
            store=InMemoryIntegrationRegistry(
                settings.api_key_prefix,
                max_idempotency_keys=settings.idempotency_cache_size,
            ),
        )

    async def close(self) -> None:
        await self.store.close()
