"""Protocol stats, integration reads and event feeds."""

import pytest

AUTHORITY = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"
SEED_SIGNER = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"


@pytest.mark.asyncio
async def test_protocol_stats(client):
    response = await client.get("/stats/protocol")
    data = response.json()["data"]
    assert data["totalMinted"] == "50000.000000"
    assert data["totalRedeemed"] == "10000.000000"
    assert set(data["window"]) == {"start", "end"}


@pytest.mark.asyncio
async def test_historical_stats_days(client):
    response = await client.get("/stats/historical", params={"days": 5})
    assert len(response.json()["data"]) == 5


@pytest.mark.asyncio
async def test_integration_stats_aggregate_history(client, integration):
    integration_id = integration["integrationId"]
    stats = await client.get("/integrations/stats", params={"integrationId": integration_id})
    history = await client.get(
        "/integrations/historical-stats", params={"integrationId": integration_id},
    )
    data = stats.json()["data"]
    points = history.json()["data"]
    assert len(points) == 30
    assert data["stablecoin"] == "rUSD"
    assert data["holders"] == 0
    assert data["window"]["start"] == points[0]["timestamp"]
    assert data["window"]["end"] == points[-1]["timestamp"]


@pytest.mark.asyncio
async def test_integration_exchange_rate_follows_stablecoin(client, integration):
    rate = await client.get(
        "/integrations/exchange-rate", params={"integrationId": integration["integrationId"]},
    )
    direct = await client.get("/stablecoins/rUSD/rate")
    assert rate.json() == direct.json()


@pytest.mark.asyncio
async def test_integration_events_newest_first(client, integration):
    integration_id = integration["integrationId"]
    await client.post("/integrations/config/update", json={
        "integrationId": integration_id, "feeBps": 10,
    })
    response = await client.get("/integrations/events", params={"integrationId": integration_id})
    kinds = [e["kind"] for e in response.json()["data"]]
    assert kinds == ["configUpdate", "integrationInitialized"]


@pytest.mark.asyncio
async def test_recent_events_merge_seed_and_recorded(client, integration):
    response = await client.get("/events/recent")
    events = response.json()["data"]
    assert events[0]["kind"] == "integrationInitialized"
    assert {"mint", "redeem"} <= {e["kind"] for e in events}


@pytest.mark.asyncio
async def test_recent_events_filter_and_limit(client):
    response = await client.get("/events/recent", params={"kind": "mint", "limit": 1})
    events = response.json()["data"]
    assert len(events) == 1
    assert events[0]["kind"] == "mint"


@pytest.mark.asyncio
async def test_recent_events_unknown_kind(client):
    response = await client.get("/events/recent", params={"kind": "airdrop"})
    assert response.status_code == 400
    assert response.json()["error"]["details"][0]["rule"] == "INVALID_ENUM_VALUE"


@pytest.mark.asyncio
async def test_events_by_signer(client, integration):
    response = await client.get("/events/by-signer", params={"signer": SEED_SIGNER})
    events = response.json()["data"]
    assert all(e["signer"] == SEED_SIGNER for e in events)
    assert events[0]["kind"] == "integrationInitialized"
    assert len(events) == 3


@pytest.mark.asyncio
async def test_events_limit_out_of_range(client):
    response = await client.get("/events/recent", params={"limit": 101})
    assert response.status_code == 400
    assert response.json()["error"]["details"][0]["rule"] == "OUT_OF_RANGE"
