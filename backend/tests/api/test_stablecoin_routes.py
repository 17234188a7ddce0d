"""Stablecoin routes: catalog reads, quotes, mint/burn transactions.

Tests cover:
    - Catalog, caps, APY and rate reads in the success envelope
    - Quote direction, fixed-precision strings, INVALID_AMOUNT, unknown symbol 404
    - Upstream path spellings and stablecoinIndex bodies
    - Supply cap and slippage business rules
    - Byte-identical repeated GETs
"""

from decimal import Decimal

import pytest

from reflect_mirror.core.transactions import decode_placeholder_transaction

SIGNER = "4Nd1mBQtrMJVYVfKf2PJy9NZUZdTAsp7D4xWLs4gDB4T"


@pytest.mark.asyncio
async def test_list_stablecoins_returns_catalog(client):
    response = await client.get("/stablecoins")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"][0]["symbol"] == "rUSD"
    assert body["data"][0]["index"] == 0


@pytest.mark.asyncio
async def test_supply_caps_use_fixed_decimal_strings(client):
    response = await client.get("/stablecoins/supply-caps")
    cap = response.json()["data"][0]
    assert cap["supplyCap"] == "1000000000.000000"
    assert cap["currentSupply"] == "500000000.000000"
    assert cap["remainingCapacity"] == "500000000.000000"
    assert cap["utilizationPercentage"] == "50.000000"


@pytest.mark.asyncio
async def test_current_apy(client):
    response = await client.get("/stablecoins/rUSD/apy")
    assert response.status_code == 200
    assert response.json()["data"]["apy"] == "2.240000"


@pytest.mark.asyncio
async def test_apy_history_defaults_to_thirty_ascending_points(client):
    response = await client.get("/stablecoins/rUSD/apy/history")
    points = response.json()["data"]
    assert len(points) == 30
    timestamps = [p["timestamp"] for p in points]
    assert timestamps == sorted(timestamps)
    assert len(set(timestamps)) == 30


@pytest.mark.asyncio
async def test_rate_history_honors_days(client):
    response = await client.get("/stablecoins/rUSD/rate/history", params={"days": 3})
    assert len(response.json()["data"]) == 3


@pytest.mark.asyncio
async def test_rate_history_days_out_of_range(client):
    response = await client.get("/stablecoins/rUSD/rate/history", params={"days": 0})
    assert response.status_code == 400
    detail = response.json()["error"]["details"][0]
    assert detail == {
        "field": "days", "rule": "OUT_OF_RANGE", "message": detail["message"],
    }


@pytest.mark.asyncio
async def test_latest_rates_include_upstream_record(client):
    response = await client.get("/stablecoins/rates/latest")
    record = response.json()["data"][0]
    assert record["id"] == 105511
    assert record["receiptUsdValueBps"] == 1016858791
    assert record["rate"] == "1.016858791"


@pytest.mark.asyncio
async def test_repeated_gets_are_byte_identical(client):
    first = await client.get("/stablecoins/rUSD/apy/history", params={"days": 12})
    second = await client.get("/stablecoins/rUSD/apy/history", params={"days": 12})
    assert first.content == second.content


@pytest.mark.asyncio
@pytest.mark.parametrize("method,path,body", [
    ("GET", "/stablecoins/xUSD/apy", None),
    ("GET", "/stablecoins/xUSD/apy/history", None),
    ("GET", "/stablecoins/xUSD/rate", None),
    ("GET", "/stablecoins/xUSD/rate/history", None),
    ("POST", "/stablecoins/quote", {"stablecoin": "xUSD", "amount": "10", "side": "mint"}),
    ("POST", "/stablecoins/mint/tx", {"stablecoin": "xUSD", "amount": "10", "signer": SIGNER}),
    ("POST", "/stablecoins/burn/tx", {"stablecoin": "xUSD", "amount": "10", "signer": SIGNER}),
    ("GET", "/stablecoins/x-usd/apy", None),
    ("GET", "/stablecoins/AVeryLongUnknownSymbol/rate", None),
    ("GET", "/stablecoins/xUSD/realtime-rate", None),
    ("GET", "/stablecoins/xUSD/historical-apy", None),
    ("GET", "/stablecoins/xUSD/historical-rates", None),
    ("POST", "/stablecoins/quote", {"stablecoin": "x_USD", "amount": "10", "side": "mint"}),
    ("POST", "/stablecoins/quote", {"stablecoinIndex": 7, "amount": "10", "side": "mint"}),
    ("POST", "/stablecoins/mint/tx", {"stablecoinIndex": 7, "amount": "10", "signer": SIGNER}),
])
async def test_unknown_stablecoin_is_not_found_everywhere(client, method, path, body):
    response = await client.request(method, path, json=body)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


@pytest.mark.asyncio
async def test_quote_mint_divides_by_rate(client):
    response = await client.post("/stablecoins/quote", json={
        "stablecoin": "rUSD", "amount": 10, "side": "mint",
    })
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["amount"] == "10.000000"
    assert data["side"] == "mint"
    assert data["computedRate"] == "1.016858791"
    assert Decimal(data["resultAmount"]) < Decimal(10)
    assert len(data["resultAmount"].split(".")[1]) == 6


@pytest.mark.asyncio
async def test_quote_redeem_multiplies_by_rate(client):
    response = await client.post("/stablecoins/quote", json={
        "stablecoin": "rUSD", "amount": "10", "side": "redeem",
    })
    assert response.json()["data"]["resultAmount"] == "10.168587"


@pytest.mark.asyncio
async def test_quote_fractional_json_number_is_exact(client):
    response = await client.post("/stablecoins/quote", json={
        "stablecoin": "rUSD", "amount": 0.1, "side": "redeem",
    })
    assert response.json()["data"]["amount"] == "0.100000"


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [-1, 0, "-0.5"])
async def test_quote_non_positive_amount_is_invalid_amount(client, amount):
    response = await client.post("/stablecoins/quote", json={
        "stablecoin": "rUSD", "amount": amount, "side": "mint",
    })
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"][0]["field"] == "amount"
    assert error["details"][0]["rule"] == "INVALID_AMOUNT"


@pytest.mark.asyncio
async def test_quote_unknown_side_is_invalid_enum(client):
    response = await client.post("/stablecoins/quote", json={
        "stablecoin": "rUSD", "amount": 1, "side": "swap",
    })
    assert response.status_code == 400
    assert response.json()["error"]["details"][0]["rule"] == "INVALID_ENUM_VALUE"


@pytest.mark.asyncio
async def test_quote_missing_field(client):
    response = await client.post("/stablecoins/quote", json={"stablecoin": "rUSD", "amount": 1})
    detail = response.json()["error"]["details"][0]
    assert detail["field"] == "side"
    assert detail["rule"] == "MISSING_FIELD"


@pytest.mark.asyncio
async def test_quote_mint_over_supply_cap_conflicts(client):
    response = await client.post("/stablecoins/quote", json={
        "stablecoin": "rUSD", "amount": "600000000", "side": "mint",
    })
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "SUPPLY_CAP_EXCEEDED"


@pytest.mark.asyncio
async def test_body_that_is_not_an_object_is_invalid_json(client):
    response = await client.post(
        "/stablecoins/quote", content=b"[1, 2]",
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"]["details"][0]["rule"] == "INVALID_JSON"


@pytest.mark.asyncio
async def test_malformed_body_is_invalid_json(client):
    response = await client.post(
        "/stablecoins/quote", content=b"{not json",
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"]["details"][0]["rule"] == "INVALID_JSON"


@pytest.mark.asyncio
async def test_mint_tx_returns_placeholder_descriptor(client):
    response = await client.post("/stablecoins/mint/tx", json={
        "stablecoin": "rUSD", "depositAmount": "100", "signer": SIGNER,
        "cluster": "devnet",
    })
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["kind"] == "mint"
    assert data["cluster"] == "devnet"
    assert data["amount"] == "100.000000"
    assert data["encoding"] == "base64"
    assert data["placeholder"] is True
    decoded = decode_placeholder_transaction(data["transaction"])
    assert decoded["fields"]["signer"] == SIGNER


@pytest.mark.asyncio
async def test_tx_cluster_defaults_to_settings(client, settings):
    response = await client.post("/stablecoins/burn/tx", json={
        "stablecoin": "rUSD", "amount": "5", "signer": SIGNER,
    })
    assert response.json()["data"]["cluster"] == settings.default_cluster.value


@pytest.mark.asyncio
async def test_mint_tx_slippage_exceeded(client):
    response = await client.post("/stablecoins/mint/tx", json={
        "stablecoin": "rUSD", "amount": "100", "signer": SIGNER,
        "minimumReceived": "100",
    })
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "SLIPPAGE_EXCEEDED"


@pytest.mark.asyncio
async def test_mint_tx_rejects_malformed_signer(client):
    response = await client.post("/stablecoins/mint/tx", json={
        "stablecoin": "rUSD", "amount": "1", "signer": "0xdeadbeef",
    })
    assert response.status_code == 400
    detail = response.json()["error"]["details"][0]
    assert detail["field"] == "signer"
    assert detail["rule"] == "INVALID_FORMAT"


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", ["0.0000001", "2.1234567"])
async def test_quote_amount_finer_than_six_places_is_rejected(client, amount):
    response = await client.post("/stablecoins/quote", json={
        "stablecoin": "rUSD", "amount": amount, "side": "mint",
    })
    assert response.status_code == 400
    detail = response.json()["error"]["details"][0]
    assert detail["field"] == "amount"
    assert detail["rule"] == "INVALID_AMOUNT"


@pytest.mark.asyncio
async def test_quote_smallest_unit_is_echoed_exactly(client):
    response = await client.post("/stablecoins/quote", json={
        "stablecoin": "rUSD", "amount": "0.000001", "side": "redeem",
    })
    assert response.status_code == 200
    assert response.json()["data"]["amount"] == "0.000001"


@pytest.mark.asyncio
@pytest.mark.parametrize("upstream,native,params", [
    ("/stablecoins/exchange-rates", "/stablecoins/rates/latest", None),
    ("/stablecoins/rUSD/realtime-rate", "/stablecoins/rUSD/rate", None),
    ("/stablecoins/rUSD/historical-apy", "/stablecoins/rUSD/apy/history", {"days": 5}),
    ("/stablecoins/rUSD/historical-rates", "/stablecoins/rUSD/rate/history", {"days": 5}),
])
async def test_upstream_paths_match_native_routes(client, upstream, native, params):
    upstream_response = await client.get(upstream, params=params)
    native_response = await client.get(native, params=params)
    assert upstream_response.status_code == 200
    assert upstream_response.content == native_response.content


@pytest.mark.asyncio
async def test_quote_by_stablecoin_index(client):
    by_index = await client.post("/stablecoins/quote", json={
        "stablecoinIndex": 0, "amount": "10", "side": "redeem",
    })
    by_symbol = await client.post("/stablecoins/quote", json={
        "stablecoin": "rUSD", "amount": "10", "side": "redeem",
    })
    assert by_index.status_code == 200
    assert by_index.json() == by_symbol.json()
    assert by_index.json()["data"]["stablecoin"] == "rUSD"


@pytest.mark.asyncio
async def test_mint_tx_with_upstream_body(client):
    response = await client.post("/stablecoins/mint/tx", json={
        "stablecoinIndex": 0, "depositAmount": 1000000, "signer": SIGNER,
    })
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["stablecoin"] == "rUSD"
    assert data["amount"] == "1000000.000000"


@pytest.mark.asyncio
async def test_tx_without_stablecoin_or_index_is_missing_field(client):
    response = await client.post("/stablecoins/burn/tx", json={
        "amount": "5", "signer": SIGNER,
    })
    assert response.status_code == 400
    detail = response.json()["error"]["details"][0]
    assert detail["field"] == "stablecoin"
    assert detail["rule"] == "MISSING_FIELD"
