"""Per-token market metadata returned by market info resolvers."""

from __future__ import annotations

from pydantic import BaseModel


class MarketData(BaseModel):
    """Provider market as returned by a PredictionMarketProvider."""

    id: str
    question: str = ""
    thumbnail_url: str | None = None
    yes_token_id: str = ""
    no_token_id: str = ""
    status: str = "active"
    url: str | None = None
    parent_market_id: str | None = None


class ResolvedMarketInfo(BaseModel):
    """Market metadata for one outcome token, tagged with its provider."""

    provider_id: str
    market_id: str = ""
    question: str = ""
    yes_token_id: str = ""
    no_token_id: str = ""
    thumbnail_url: str | None = None
    url: str | None = None
