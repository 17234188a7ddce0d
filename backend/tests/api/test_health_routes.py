"""Liveness routes and unmatched-route handling."""

import pytest


@pytest.mark.asyncio
async def test_health_returns_exact_status_body(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.content == b'{"status":"ok"}'


@pytest.mark.asyncio
async def test_root_is_not_enveloped(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "reflect api running"}


@pytest.mark.asyncio
async def test_unknown_path_returns_route_not_found(client):
    response = await client.get("/stablecoins/rUSD/unknown")
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "ROUTE_NOT_FOUND"
    assert body["error"]["category"] == "resource_not_found"


@pytest.mark.asyncio
async def test_wrong_method_is_reported_as_route_not_found(client):
    response = await client.get("/stablecoins/quote")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "ROUTE_NOT_FOUND"
