"""Probable provider - native BSC outcome tokens."""

from __future__ import annotations

from typing import Any

from pokvault.models import MarketData
from pokvault.providers.base import PredictionMarketProvider


def parse_market(raw: dict[str, Any], market_id: str = "") -> MarketData:
    mid = str(raw.get("id") or market_id)
    return MarketData(
        id=mid,
        question=raw.get("question") or raw.get("title") or "",
        thumbnail_url=raw.get("thumbnailUrl") or raw.get("image"),
        yes_token_id=str(raw.get("yesTokenId") or ""),
        no_token_id=str(raw.get("noTokenId") or ""),
        status=raw.get("status") or "active",
        url=f"https://probable.markets/market/{mid}" if mid else None,
    )


class ProbableProvider(PredictionMarketProvider):
    id = "probable"
    name = "Probable"
    decimals = 18
    requires_bridging = False

    async def get_market_by_id(self, market_id: str) -> MarketData | None:
        data = await self._get_json(f"/probable/market/{market_id}")
        if not data:
            return None
        return parse_market(data, market_id)

    async def get_market_by_outcome_token(self, outcome_token_id: str) -> MarketData | None:
        data = await self._get_json("/market", {"outcomeTokenId": outcome_token_id})
        if not data:
            return None
        return parse_market(data)
