"""Static Market Data: deterministic MarketDataSource mirroring upstream sample values.

Invariants:
    - Every value is a pure function of the arguments and AS_OF (no wall clock)
    - Series are ascending by timestamp, one point per day, the last point at AS_OF
    - APY values stay >= 0; rates stay > 0; currentSupply <= supplyCap
    - Unknown symbols raise ResourceNotFoundError (callers may also pre-check the catalog)

Design Decisions:
    - Values taken from the upstream API samples (rUSD index 0, record 105511,
      base value 1016789908 bps, receipt value 1016858791 bps)
    - Variation comes from a fixed wobble table so repeated reads are byte-identical
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from reflect_mirror.core.domain_types import EventKind
from reflect_mirror.core.errors import ResourceNotFoundError
from reflect_mirror.core.quote import rate_from_bps
from reflect_mirror.schemas.common import TimeWindow
from reflect_mirror.schemas.events import IntegrationEvent
from reflect_mirror.schemas.integration import IntegrationStatsPoint
from reflect_mirror.schemas.stablecoin import (
    ApyRecord, ExchangeRateRecord, StablecoinInfo, SupplyCap,
)
from reflect_mirror.schemas.stats import ProtocolStats, TvlVolumePoint

AS_OF = datetime(2025, 12, 19, 17, 4, 8, 502000, tzinfo=timezone.utc)

# Repeating daily offsets, in units of the series' step
_WOBBLE = (0, 3, -2, 5, 1, -4, 2, -1, 4, -3, 0, 1)


@dataclass(frozen=True)
class StablecoinMarket:
    info: StablecoinInfo
    apy: Decimal
    apy_step: Decimal
    receipt_usd_value_bps: int
    base_usd_value_bps: int
    bps_step: int
    rate_record_id: int
    supply_cap: Decimal
    current_supply: Decimal


DEFAULT_MARKETS: tuple[StablecoinMarket, ...] = (
    StablecoinMarket(
        info=StablecoinInfo(
            symbol="rUSD", index=0, name="Reflect USD", decimals=6,
            collateral="USDC",
        ),
        apy=Decimal("2.24"),
        apy_step=Decimal("0.01"),
        receipt_usd_value_bps=1_016_858_791,
        base_usd_value_bps=1_016_789_908,
        bps_step=4_959,
        rate_record_id=105_511,
        supply_cap=Decimal("1000000000"),
        current_supply=Decimal("500000000"),
    ),
)

_PROTOCOL_TVL = Decimal("508429395.50")
_PROTOCOL_DAILY_VOLUME = Decimal("1250000")
_PROTOCOL_MINTED = Decimal("50000")
_PROTOCOL_REDEEMED = Decimal("10000")
_INTEGRATION_DAILY_MINTED = Decimal("1000")
_INTEGRATION_DAILY_REDEEMED = Decimal("200")

_SEED_SIGNER = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"


class StaticMarketData:
    """MarketDataSource backed by fixed tables."""

    def __init__(
        self,
        markets: tuple[StablecoinMarket, ...] = DEFAULT_MARKETS,
        as_of: datetime = AS_OF,
    ):
        self._markets = {m.info.symbol: m for m in markets}
        self._as_of = as_of

    async def list_stablecoins(self) -> list[StablecoinInfo]:
        return [m.info for m in self._ordered()]

    async def get_stablecoin(self, symbol: str) -> StablecoinInfo | None:
        market = self._markets.get(symbol)
        return market.info if market else None

    async def supply_caps(self) -> list[SupplyCap]:
        return [_supply_cap(m) for m in self._ordered()]

    async def current_apy(self, symbol: str) -> ApyRecord:
        market = self._market(symbol)
        return ApyRecord(stablecoin=symbol, apy=market.apy, timestamp=self._as_of)

    async def apy_history(self, symbol: str, days: int) -> list[ApyRecord]:
        market = self._market(symbol)
        return [
            ApyRecord(
                stablecoin=symbol,
                apy=max(market.apy + market.apy_step * _wobble(offset), Decimal(0)),
                timestamp=ts,
            )
            for offset, ts in self._daily(days)
        ]

    async def current_rate(self, symbol: str) -> ExchangeRateRecord:
        market = self._market(symbol)
        return _rate_record(market, market.rate_record_id, 0, self._as_of)

    async def rate_history(
        self, symbol: str, days: int,
    ) -> list[ExchangeRateRecord]:
        market = self._market(symbol)
        return [
            _rate_record(market, market.rate_record_id - offset, offset, ts)
            for offset, ts in self._daily(days)
        ]

    async def protocol_stats(self) -> ProtocolStats:
        return ProtocolStats(
            total_value_locked=_PROTOCOL_TVL,
            volume=_PROTOCOL_DAILY_VOLUME,
            total_minted=_PROTOCOL_MINTED,
            total_redeemed=_PROTOCOL_REDEEMED,
            window=TimeWindow(start=self._as_of - timedelta(days=1), end=self._as_of),
        )

    async def tvl_volume_history(self, days: int) -> list[TvlVolumePoint]:
        return [
            TvlVolumePoint(
                timestamp=ts,
                tvl=_PROTOCOL_TVL - Decimal(1_000_000) * offset,
                volume=_PROTOCOL_DAILY_VOLUME
                + Decimal(10_000) * _wobble(offset),
            )
            for offset, ts in self._daily(days)
        ]

    async def integration_activity(
        self, integration_id: str, days: int,
    ) -> list[IntegrationStatsPoint]:
        return [
            IntegrationStatsPoint(
                timestamp=ts,
                minted=_INTEGRATION_DAILY_MINTED + Decimal(10) * _wobble(offset),
                redeemed=_INTEGRATION_DAILY_REDEEMED,
            )
            for offset, ts in self._daily(days)
        ]

    async def protocol_events(self) -> list[IntegrationEvent]:
        """Seed protocol events, newest first."""
        return [
            IntegrationEvent(
                event_id="evt_2", kind=EventKind.REDEEM, signer=_SEED_SIGNER,
                timestamp=self._as_of - timedelta(minutes=1),
                payload={"stablecoin": "rUSD", "amount": "2500.000000"},
            ),
            IntegrationEvent(
                event_id="evt_1", kind=EventKind.MINT, signer=_SEED_SIGNER,
                timestamp=self._as_of - timedelta(minutes=2),
                payload={"stablecoin": "rUSD", "amount": "10000.000000"},
            ),
        ]

    def _ordered(self) -> list[StablecoinMarket]:
        return sorted(self._markets.values(), key=lambda m: m.info.index)

    def _market(self, symbol: str) -> StablecoinMarket:
        market = self._markets.get(symbol)
        if market is None:
            raise ResourceNotFoundError("Stablecoin", symbol)
        return market

    def _daily(self, days: int) -> list[tuple[int, datetime]]:
        """(days_before_as_of, timestamp) pairs, oldest first."""
        return [
            (offset, self._as_of - timedelta(days=offset))
            for offset in range(days - 1, -1, -1)
        ]


def _wobble(offset: int) -> int:
    return _WOBBLE[offset % len(_WOBBLE)]


def _supply_cap(market: StablecoinMarket) -> SupplyCap:
    remaining = max(market.supply_cap - market.current_supply, Decimal(0))
    utilization = (
        market.current_supply * 100 / market.supply_cap
        if market.supply_cap else Decimal(0)
    )
    return SupplyCap(
        stablecoin=market.info.symbol,
        supply_cap=market.supply_cap,
        current_supply=market.current_supply,
        remaining_capacity=remaining,
        utilization_percentage=utilization,
    )


def _rate_record(
    market: StablecoinMarket, record_id: int, offset: int, ts: datetime,
) -> ExchangeRateRecord:
    # Receipt value accrues yield: older points are lower
    receipt = market.receipt_usd_value_bps - market.bps_step * offset
    base = market.base_usd_value_bps - market.bps_step * offset
    return ExchangeRateRecord(
        id=record_id,
        stablecoin=market.info.symbol,
        rate=rate_from_bps(receipt),
        base_usd_value_bps=base,
        receipt_usd_value_bps=receipt,
        timestamp=ts,
    )
