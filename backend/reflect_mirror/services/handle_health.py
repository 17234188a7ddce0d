"""Health Handlers: liveness bodies for GET / and GET /health (no envelope)."""

from reflect_mirror.schemas.common import EmptyRequest, StatusResponse
from reflect_mirror.services.route_context import RouteContext


async def root(request: EmptyRequest, ctx: RouteContext) -> StatusResponse:
    return StatusResponse(status="reflect api running")


async def health(request: EmptyRequest, ctx: RouteContext) -> StatusResponse:
    return StatusResponse(status="ok")
