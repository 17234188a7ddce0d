"""Dispatcher: Received → Matched → Validated → Handled → Serialized → Sent.

Invariants:
    - Handlers only ever see input that passed validate(route.request_schema)
    - Raw input = query params, then the JSON body, then path params (later wins)
    - Handler output is re-checked against route.response_schema; a mismatch is a
      ResponseContractError (generic 500, details only in the log)
    - Success bodies are {"success": true, "data": ...} unless route.envelope is False
    - MUTATION routes with an Idempotency-Key header replay the first serialized result
    - JSON numbers with a fraction are parsed as Decimal, never float

Design Decisions:
    - FastAPI only matches method and path; one generic endpoint per route runs the
      stages above, so no per-endpoint signatures or response_model declarations
    - Errors propagate as ReflectMirrorError to the global handlers (api/error_handlers.py)
"""

import json
import logging
import time
from decimal import Decimal
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from reflect_mirror.api.route_table import Route, check_unique
from reflect_mirror.core.domain_types import HandlerKind
from reflect_mirror.core.errors import (
    FieldViolation, InputValidationError, ReflectMirrorError,
    ResponseContractError, ValidationRule,
)
from reflect_mirror.core.validation import validate
from reflect_mirror.infrastructure.app_services import AppServices
from reflect_mirror.services.route_context import RouteContext

logger = logging.getLogger(__name__)

IDEMPOTENCY_HEADER = "Idempotency-Key"


def register_routes(app: FastAPI, routes: tuple[Route, ...]) -> None:
    """Add one endpoint per route. Raises RouteConfigurationError on duplicates."""
    check_unique(routes)
    for route in routes:
        app.add_api_route(
            route.path,
            _make_endpoint(route),
            methods=[route.method],
            name=route.name,
        )
    logger.info(f"Registered {len(routes)} routes")


def _make_endpoint(route: Route):
    adapter = TypeAdapter(route.response_schema)

    async def endpoint(request: Request) -> JSONResponse:
        return await dispatch(route, adapter, request)

    return endpoint


async def dispatch(route: Route, adapter: TypeAdapter, request: Request) -> JSONResponse:
    started = time.perf_counter()
    try:
        raw = await _raw_input(request)
        model = validate(route.request_schema, raw, strict=route.strict)
        ctx = _route_context(request.app.state.services)

        async def produce() -> Any:
            return conform(route, adapter, await route.handler(model, ctx))

        key = request.headers.get(IDEMPOTENCY_HEADER)
        if route.kind is HandlerKind.MUTATION and key:
            data = await ctx.store.once(f"{route.name}:{key}", produce)
        else:
            data = await produce()
    except ReflectMirrorError as exc:
        if exc.context.route is None:
            exc.context.route = route.name
        raise

    body = {"success": True, "data": data} if route.envelope else data
    logger.info(
        f"{route.method} {route.path} -> 200",
        extra={
            "route": route.name,
            "method": route.method,
            "status_code": 200,
            "duration_ms": round((time.perf_counter() - started) * 1000, 3),
        },
    )
    return JSONResponse(content=body)


def conform(route: Route, adapter: TypeAdapter, result: Any) -> Any:
    """Validate handler output against the response schema and dump it as JSON data."""
    try:
        validated = adapter.validate_python(_plain(result))
    except PydanticValidationError as exc:
        raise ResponseContractError(
            route.name, exc.errors(include_url=False, include_input=False),
        ) from exc
    return adapter.dump_python(validated, mode="json", by_alias=True)


def _plain(value: Any) -> Any:
    """Models to dicts (python mode) so validation re-runs every constraint."""
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


async def _raw_input(request: Request) -> dict[str, Any]:
    raw: dict[str, Any] = dict(request.query_params)
    body = await request.body()
    if body.strip():
        try:
            parsed = json.loads(body, parse_float=Decimal)
        except (ValueError, UnicodeDecodeError):
            raise InputValidationError([
                FieldViolation(
                    "body", ValidationRule.INVALID_JSON, "request body is not valid JSON",
                ),
            ])
        if not isinstance(parsed, dict):
            raise InputValidationError([
                FieldViolation(
                    "body", ValidationRule.INVALID_JSON,
                    "request body must be a JSON object",
                ),
            ])
        raw.update(parsed)
    raw.update(request.path_params)
    return raw


def _route_context(services: AppServices) -> RouteContext:
    return RouteContext(
        settings=services.settings, market=services.market, store=services.store,
    )
