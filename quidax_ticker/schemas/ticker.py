"""Pydantic models for the Quidax ticker payloads."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Ticker(BaseModel):
    """Quote snapshot for one market.

    Values stay as the text Quidax sends; a bare JSON number is kept as its
    string form, never parsed. The aliases are the upstream field names; the
    attribute names are what this service exposes.
    """

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    low: Optional[str] = None
    high: Optional[str] = None
    volume: Optional[str] = Field(default=None, alias="vol")
    price: Optional[str] = Field(default=None, alias="last")
    ask: Optional[str] = Field(default=None, alias="sell")
    bid: Optional[str] = Field(default=None, alias="buy")

    def to_wire(self) -> dict[str, Any]:
        """
        Serializer for the Quidax wire shape (`vol`, `last`, `sell`, `buy`).

        The HTTP routes expose the attribute names instead; use this when a
        ticker has to be handed on in the upstream format.
        """
        return self.model_dump(by_alias=True)


class MarketEnvelope(BaseModel):
    """Ticker plus the time it was observed (`at`)."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    # envelope metadata, dropped by the unwrap step; kept as sent
    timestamp: Any = Field(default=None, alias="at")
    ticker: Optional[Ticker] = None
    # only sent by /tickers/{market}
    market_name: Optional[str] = Field(default=None, alias="market")


class AllMarketsResponse(BaseModel):
    status: Optional[str] = None
    data: Optional[dict[str, Optional[MarketEnvelope]]] = None


class SingleMarketResponse(BaseModel):
    status: Optional[str] = None
    message: Optional[str] = None
    data: Optional[MarketEnvelope] = None
