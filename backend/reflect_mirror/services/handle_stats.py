"""Protocol Stats Handlers."""

from reflect_mirror.schemas.common import EmptyRequest
from reflect_mirror.schemas.stats import ProtocolStats, StatsHistoryQuery, TvlVolumePoint
from reflect_mirror.services.route_context import RouteContext


async def get_protocol_stats(
    request: EmptyRequest, ctx: RouteContext,
) -> ProtocolStats:
    return await ctx.market.protocol_stats()


async def get_historical(
    request: StatsHistoryQuery, ctx: RouteContext,
) -> list[TvlVolumePoint]:
    days = min(request.days, ctx.settings.max_history_days)
    return await ctx.market.tvl_volume_history(days)
