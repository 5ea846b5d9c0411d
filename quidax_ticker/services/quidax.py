"""Client for the public Quidax market ticker API."""

from __future__ import annotations

import logging
from typing import Any, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from quidax_ticker.schemas.ticker import AllMarketsResponse, SingleMarketResponse, Ticker
from quidax_ticker.services.unwrap import is_success, unwrap_all_markets, unwrap_single_market


logger = logging.getLogger("quidax_ticker.upstream")

QUIDAX_BASE_URL = "https://app.quidax.io"
TICKERS_PATH = "/api/v1/markets/tickers"

ModelT = TypeVar("ModelT", bound=BaseModel)


class UpstreamError(Exception):
    """Quidax could not give us a usable answer."""

    code = "upstream_error"
    message = "Quidax returned an error"

    def __init__(self, url: str, detail: str | None = None) -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"{self.message}: {url}" + (f" ({detail})" if detail else ""))

    def details(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"url": self.url}
        if self.detail:
            payload["reason"] = self.detail
        return payload


class UpstreamUnavailableError(UpstreamError):
    code = "upstream_unavailable"
    message = "Unable to reach Quidax"


class UpstreamStatusError(UpstreamError):
    code = "upstream_error"
    message = "Quidax returned a non-success HTTP status"

    def __init__(self, url: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(url, f"HTTP {status_code}")

    def details(self) -> dict[str, Any]:
        payload = super().details()
        payload["upstream_status"] = self.status_code
        return payload


class UpstreamPayloadError(UpstreamError):
    code = "upstream_malformed"
    message = "Quidax returned an unexpected payload"


class QuidaxClient:
    """
    Thin wrapper around one shared httpx.AsyncClient.

    Holds no per-request state, so a single instance serves every request.
    """

    def __init__(self, http: httpx.AsyncClient, base_url: str = QUIDAX_BASE_URL) -> None:
        self.http = http
        self.base_url = base_url.rstrip("/")

    def tickers_url(self) -> str:
        return self.base_url + TICKERS_PATH

    def ticker_url(self, symbol: str) -> str:
        # symbol is passed through as-is; Quidax decides what is valid
        return self.base_url + TICKERS_PATH + "/" + symbol

    async def _get(self, url: str, model: Type[ModelT]) -> Optional[ModelT]:
        logger.debug("GET %s", url)
        try:
            response = await self.http.get(url)
        except httpx.HTTPError as exc:
            logger.warning("quidax unreachable | %s | %s", url, exc)
            raise UpstreamUnavailableError(url, str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            logger.warning("quidax http error | %s | %s", url, response.status_code)
            raise UpstreamStatusError(url, response.status_code)

        if not response.content.strip():
            return None

        try:
            body = response.json()
        except ValueError as exc:
            logger.warning("quidax sent non-JSON body | %s", url)
            raise UpstreamPayloadError(url, "body is not valid JSON") from exc

        if body is None:
            return None

        try:
            return model.model_validate(body)
        except ValidationError as exc:
            logger.warning("quidax payload did not match %s | %s", model.__name__, url)
            raise UpstreamPayloadError(url, f"{exc.error_count()} validation error(s)") from exc

    async def fetch_all_markets(self) -> Optional[AllMarketsResponse]:
        return await self._get(self.tickers_url(), AllMarketsResponse)

    async def fetch_market_response(self, symbol: str) -> Optional[SingleMarketResponse]:
        return await self._get(self.ticker_url(symbol), SingleMarketResponse)

    async def fetch_tickers(self) -> dict[str, Ticker]:
        response = await self.fetch_all_markets()
        if response is not None and not is_success(response.status):
            logger.info("quidax bulk tickers soft failure | status=%s", response.status)
        return unwrap_all_markets(response)

    async def fetch_market(self, symbol: str) -> Optional[Ticker]:
        response = await self.fetch_market_response(symbol)
        if response is not None and not is_success(response.status):
            logger.info(
                "quidax ticker soft failure | market=%s | status=%s | message=%s",
                symbol,
                response.status,
                response.message,
            )
        return unwrap_single_market(response)
