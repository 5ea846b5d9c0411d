"""Strip the Quidax envelopes down to bare tickers.

Quidax wraps tickers one level deep for a single market and two levels
deep (a keyed map of envelopes) for the bulk endpoint, so each shape gets
its own function.
"""

from __future__ import annotations

from typing import Optional

from quidax_ticker.schemas.ticker import AllMarketsResponse, SingleMarketResponse, Ticker


SUCCESS_STATUS = "success"


def is_success(status: Optional[str]) -> bool:
    return status == SUCCESS_STATUS


def unwrap_all_markets(response: Optional[AllMarketsResponse]) -> dict[str, Ticker]:
    """
    Returns {symbol: ticker} in upstream order.

    A missing body or a non-"success" status yields {}. Entries without a
    ticker are skipped.
    """
    tickers: dict[str, Ticker] = {}

    if response is None or not is_success(response.status):
        return tickers

    for symbol, envelope in (response.data or {}).items():
        if envelope is None or envelope.ticker is None:
            continue
        tickers[symbol] = envelope.ticker

    return tickers


def unwrap_single_market(response: Optional[SingleMarketResponse]) -> Optional[Ticker]:
    if response is None or not is_success(response.status):
        return None
    if response.data is None:
        return None
    return response.data.ticker
