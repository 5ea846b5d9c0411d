from __future__ import annotations

import httpx
import pytest
import pytest_asyncio

from quidax_ticker.services.quidax import (
    QuidaxClient,
    UpstreamPayloadError,
    UpstreamStatusError,
    UpstreamUnavailableError,
)


BASE_URL = "https://quidax.test"
WIRE = {"low": "1", "high": "2", "vol": "3", "last": "4", "sell": "5", "buy": "6"}


@pytest_asyncio.fixture
async def make_client():
    """Builds QuidaxClients over a MockTransport; closes them afterwards."""
    opened: list[httpx.AsyncClient] = []

    def _make(handler, **client_kwargs) -> QuidaxClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler), **client_kwargs)
        opened.append(http)
        return QuidaxClient(http, BASE_URL)

    try:
        yield _make
    finally:
        for http in opened:
            await http.aclose()


@pytest.mark.asyncio
async def test_urls_are_plain_concatenation():
    async with httpx.AsyncClient() as http:
        client = QuidaxClient(http, BASE_URL + "/")
        assert client.tickers_url() == "https://quidax.test/api/v1/markets/tickers"
        assert client.ticker_url("BTCngn") == "https://quidax.test/api/v1/markets/tickers/BTCngn"


@pytest.mark.asyncio
async def test_fetch_tickers_calls_bulk_path_once(make_client):
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(
            200,
            json={"status": "success", "data": {"btcngn": {"at": 1, "ticker": WIRE}}},
        )

    tickers = await make_client(handler).fetch_tickers()

    assert seen == ["https://quidax.test/api/v1/markets/tickers"]
    assert list(tickers) == ["btcngn"]
    assert tickers["btcngn"].volume == "3"


@pytest.mark.asyncio
async def test_fetch_market_forwards_symbol_verbatim(make_client):
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(
            200,
            json={
                "status": "success",
                "message": "Successful",
                "data": {"at": 1, "ticker": WIRE, "market": "ETHngn"},
            },
        )

    ticker = await make_client(handler).fetch_market("ETHngn")

    assert seen == ["/api/v1/markets/tickers/ETHngn"]
    assert ticker is not None
    assert ticker.ask == "5"


@pytest.mark.asyncio
async def test_numeric_values_do_not_sink_the_bulk_payload(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "status": "success",
                "data": {
                    "btcngn": {"at": 1700000000.5, "ticker": {**WIRE, "vol": 3.5, "last": 42}},
                    "ethngn": {"at": "1700000000", "ticker": WIRE},
                },
            },
        )

    tickers = await make_client(handler).fetch_tickers()

    assert list(tickers) == ["btcngn", "ethngn"]
    assert tickers["btcngn"].volume == "3.5"
    assert tickers["btcngn"].price == "42"
    assert tickers["ethngn"].volume == "3"


@pytest.mark.asyncio
async def test_soft_failure_is_absent_not_error(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "error", "message": "not found", "data": None})

    client = make_client(handler)
    assert await client.fetch_market("unknownpair") is None

    response = await client.fetch_market_response("unknownpair")
    assert response is not None
    assert response.message == "not found"


@pytest.mark.asyncio
async def test_empty_body_is_absent(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"")

    client = make_client(handler)
    assert await client.fetch_all_markets() is None
    assert await client.fetch_tickers() == {}
    assert await client.fetch_market("btcngn") is None


@pytest.mark.asyncio
async def test_transport_error_raises_unavailable(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamUnavailableError) as excinfo:
        await make_client(handler).fetch_tickers()

    assert excinfo.value.code == "upstream_unavailable"
    assert excinfo.value.url.endswith("/api/v1/markets/tickers")


@pytest.mark.asyncio
async def test_non_2xx_raises_status_error(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="maintenance")

    with pytest.raises(UpstreamStatusError) as excinfo:
        await make_client(handler).fetch_market("btcngn")

    assert excinfo.value.status_code == 503
    assert excinfo.value.details()["upstream_status"] == 503


@pytest.mark.asyncio
async def test_unfollowed_redirect_is_a_status_error_not_absent(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(301, headers={"Location": "https://quidax.test/moved"})

    client = make_client(handler)

    with pytest.raises(UpstreamStatusError) as excinfo:
        await client.fetch_market("btcngn")
    assert excinfo.value.status_code == 301

    with pytest.raises(UpstreamStatusError):
        await client.fetch_tickers()


@pytest.mark.asyncio
async def test_redirect_is_followed_when_client_allows_it(make_client):
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        if request.url.path == "/api/v1/markets/tickers/btcngn":
            return httpx.Response(302, headers={"Location": "https://quidax.test/v2/btcngn"})
        return httpx.Response(
            200,
            json={"status": "success", "message": "ok", "data": {"ticker": WIRE}},
        )

    ticker = await make_client(handler, follow_redirects=True).fetch_market("btcngn")

    assert seen == ["/api/v1/markets/tickers/btcngn", "/v2/btcngn"]
    assert ticker is not None
    assert ticker.bid == "6"


@pytest.mark.asyncio
async def test_non_json_body_raises_payload_error(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>oops</html>")

    with pytest.raises(UpstreamPayloadError):
        await make_client(handler).fetch_tickers()


@pytest.mark.asyncio
async def test_wrong_shape_raises_payload_error(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "success", "data": ["btcngn"]})

    with pytest.raises(UpstreamPayloadError) as excinfo:
        await make_client(handler).fetch_tickers()

    assert excinfo.value.code == "upstream_malformed"
