"""Boundary Protocols: contracts between handlers and data sources.

Invariants:
    - Handlers depend on these Protocols only, never on a concrete source
    - Market data methods return schema models, so a live source is checked by the same
      response schemas as the static one
    - IntegrationStore.get/mutate raise ResourceNotFoundError for unknown ids
    - IntegrationStore.mutate serializes calls per integration id and bumps version once

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async methods: implementations may do IO even though the static ones do not
"""

from datetime import datetime
from typing import Awaitable, Callable, Protocol, TypeVar

from reflect_mirror.core.domain_types import EventKind
from reflect_mirror.core.integrations import IntegrationRecord
from reflect_mirror.schemas.events import IntegrationEvent
from reflect_mirror.schemas.integration import IntegrationStatsPoint
from reflect_mirror.schemas.stablecoin import (
    ApyRecord, ExchangeRateRecord, StablecoinInfo, SupplyCap,
)
from reflect_mirror.schemas.stats import ProtocolStats, TvlVolumePoint

T = TypeVar("T")

# record -> (new record, result). Raising aborts the mutation.
Mutation = Callable[[IntegrationRecord], tuple[IntegrationRecord, T]]


class MarketDataSource(Protocol):
    """Read-only market data: catalog, caps, APY, rates, protocol stats, seed events."""
    async def list_stablecoins(self) -> list[StablecoinInfo]: ...
    async def get_stablecoin(self, symbol: str) -> StablecoinInfo | None: ...
    async def supply_caps(self) -> list[SupplyCap]: ...
    async def current_apy(self, symbol: str) -> ApyRecord: ...
    async def apy_history(self, symbol: str, days: int) -> list[ApyRecord]: ...
    async def current_rate(self, symbol: str) -> ExchangeRateRecord: ...
    async def rate_history(
        self, symbol: str, days: int,
    ) -> list[ExchangeRateRecord]: ...
    async def protocol_stats(self) -> ProtocolStats: ...
    async def tvl_volume_history(self, days: int) -> list[TvlVolumePoint]: ...
    async def integration_activity(
        self, integration_id: str, days: int,
    ) -> list[IntegrationStatsPoint]: ...
    async def protocol_events(self) -> list[IntegrationEvent]: ...


class IntegrationStore(Protocol):
    """Integration registry keyed by integration id."""
    async def create(
        self, authority: str, name: str, stablecoin: str, fee_bps: int,
    ) -> IntegrationRecord: ...
    async def get(self, integration_id: str) -> IntegrationRecord: ...
    async def list_by_authority(self, authority: str) -> list[IntegrationRecord]: ...
    async def mutate(
        self,
        integration_id: str,
        mutation: Mutation[T],
        event_kind: EventKind,
        signer: str | None = None,
        expected_version: int | None = None,
        payload: dict | None = None,
    ) -> tuple[IntegrationRecord, T]: ...
    async def events(
        self,
        integration_id: str | None = None,
        signer: str | None = None,
        kind: EventKind | None = None,
        limit: int = 20,
    ) -> list[IntegrationEvent]: ...
    async def once(
        self, idempotency_key: str, produce: Callable[[], Awaitable[T]],
    ) -> T: ...
    def now(self) -> datetime: ...
    async def close(self) -> None: ...
