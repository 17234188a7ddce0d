"""Integration Read Handlers: stats, activity history, event feed, exchange rate.

Invariants:
    - Unknown integrationId is a 404 on every handler (store.get runs first)
    - Stats aggregate the same activity series historical-stats returns
    - outstandingSupply = max(totalMinted - totalRedeemed, 0)
    - The stats window spans the activity series; with no activity it is the
      STATS_WINDOW_DAYS days ending now
"""

from datetime import datetime, timedelta
from decimal import Decimal

from reflect_mirror.schemas.common import TimeWindow
from reflect_mirror.schemas.events import IntegrationEvent
from reflect_mirror.schemas.integration import (
    IntegrationEventsQuery, IntegrationHistoryQuery, IntegrationRef,
    IntegrationStats, IntegrationStatsPoint,
)
from reflect_mirror.schemas.stablecoin import ExchangeRateRecord
from reflect_mirror.services.route_context import RouteContext

STATS_WINDOW_DAYS = 30


async def get_stats(
    request: IntegrationRef, ctx: RouteContext,
) -> IntegrationStats:
    record = await ctx.store.get(request.integration_id)
    points = await ctx.market.integration_activity(
        record.integration_id, STATS_WINDOW_DAYS,
    )
    minted = sum((p.minted for p in points), Decimal(0))
    redeemed = sum((p.redeemed for p in points), Decimal(0))
    return IntegrationStats(
        integration_id=record.integration_id,
        stablecoin=record.stablecoin,
        total_minted=minted,
        total_redeemed=redeemed,
        outstanding_supply=max(minted - redeemed, Decimal(0)),
        holders=len(record.whitelist),
        window=_activity_window(points, ctx.store.now()),
    )


async def get_historical_stats(
    request: IntegrationHistoryQuery, ctx: RouteContext,
) -> list[IntegrationStatsPoint]:
    record = await ctx.store.get(request.integration_id)
    days = min(request.days, ctx.settings.max_history_days)
    return await ctx.market.integration_activity(record.integration_id, days)


async def list_events(
    request: IntegrationEventsQuery, ctx: RouteContext,
) -> list[IntegrationEvent]:
    record = await ctx.store.get(request.integration_id)
    return await ctx.store.events(
        integration_id=record.integration_id, limit=request.limit,
    )


async def get_exchange_rate(
    request: IntegrationRef, ctx: RouteContext,
) -> ExchangeRateRecord:
    record = await ctx.store.get(request.integration_id)
    return await ctx.market.current_rate(record.stablecoin)


def _activity_window(points: list[IntegrationStatsPoint], now: datetime) -> TimeWindow:
    if not points:
        return TimeWindow(start=now - timedelta(days=STATS_WINDOW_DAYS), end=now)
    return TimeWindow(start=points[0].timestamp, end=points[-1].timestamp)
