# quidax_ticker/api/tickers.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from quidax_ticker.config.settings import Settings
from quidax_ticker.schemas.ticker import Ticker
from quidax_ticker.services.quidax import QuidaxClient, UpstreamError


# mounted under Settings.API_PREFIX by create_app()
router = APIRouter(tags=["tickers"])


def get_quidax_client(request: Request) -> QuidaxClient:
    return request.app.state.quidax_client


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def _error_response(
    *,
    code: str,
    message: str,
    status_code: int = 400,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    payload: dict[str, Any] = {"error": {"code": code, "message": message}}
    if details:
        payload["error"]["details"] = details
    return JSONResponse(status_code=status_code, content=payload)


def _upstream_error_response(err: UpstreamError) -> JSONResponse:
    return _error_response(
        code=err.code,
        message=err.message,
        status_code=502,
        details=err.details(),
    )


@router.get(
    "/tickers",
    response_model=dict[str, Ticker],
    response_model_by_alias=False,
)
async def get_all_tickers(client: QuidaxClient = Depends(get_quidax_client)):
    """
    Every market Quidax lists, keyed by symbol in upstream order.
    Example: /api/v1/markets/tickers
    """
    try:
        return await client.fetch_tickers()
    except UpstreamError as err:
        return _upstream_error_response(err)


@router.get(
    "/tickers/{market}",
    response_model=Ticker,
    response_model_by_alias=False,
    responses={204: {"description": "Quidax has no ticker for this market"}},
)
async def get_ticker_by_market(
    market: str,
    client: QuidaxClient = Depends(get_quidax_client),
    settings: Settings = Depends(get_app_settings),
):
    """
    One market's ticker.
    Example: /api/v1/markets/tickers/btcusdt
    """
    try:
        ticker = await client.fetch_market(market)
    except UpstreamError as err:
        return _upstream_error_response(err)

    if ticker is None:
        if settings.TICKER_NOT_FOUND_AS_404:
            return _error_response(
                code="ticker_not_found",
                message=f"No ticker available for market '{market}'",
                status_code=404,
                details={"market": market},
            )
        return Response(status_code=204)

    return ticker
