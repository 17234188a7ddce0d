"""Event Feed Handlers: protocol-wide and per-signer event feeds.

Invariants:
    - Feeds merge seed protocol events with recorded integration events
    - Newest first; events with equal timestamps keep the store's recording order (newest first),
      the same order /integrations/events returns
    - At most `limit` events are returned
"""

from reflect_mirror.schemas.events import (
    IntegrationEvent, RecentEventsQuery, SignerEventsQuery,
)
from reflect_mirror.services.route_context import RouteContext


async def list_recent(
    request: RecentEventsQuery, ctx: RouteContext,
) -> list[IntegrationEvent]:
    seeded = [
        e for e in await ctx.market.protocol_events()
        if request.kind is None or e.kind == request.kind
    ]
    recorded = await ctx.store.events(kind=request.kind, limit=request.limit)
    return _newest_first(recorded + seeded)[:request.limit]


async def list_by_signer(
    request: SignerEventsQuery, ctx: RouteContext,
) -> list[IntegrationEvent]:
    seeded = [
        e for e in await ctx.market.protocol_events() if e.signer == request.signer
    ]
    recorded = await ctx.store.events(signer=request.signer, limit=request.limit)
    return _newest_first(recorded + seeded)[:request.limit]


def _newest_first(events: list[IntegrationEvent]) -> list[IntegrationEvent]:
    # sorted() is stable under reverse=True: ties keep their input order
    return sorted(events, key=lambda e: e.timestamp, reverse=True)
