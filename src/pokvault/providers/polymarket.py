"""Polymarket provider - tokens bridged from Polygon to BSC."""

from __future__ import annotations

import json
from typing import Any

import structlog

from pokvault.models import MarketData
from pokvault.providers.base import PredictionMarketProvider

log = structlog.get_logger(__name__)


def parse_token_ids(clob_token_ids: str | list[str] | None) -> tuple[str, str]:
    """(yes, no) token ids from clobTokenIds, which may be a JSON string."""
    if isinstance(clob_token_ids, list):
        token_ids = clob_token_ids
    else:
        try:
            token_ids = json.loads(clob_token_ids) if clob_token_ids else []
        except (json.JSONDecodeError, TypeError):
            token_ids = []
    if not isinstance(token_ids, list) or len(token_ids) < 2:
        log.warning("invalid_clob_token_ids", clob_token_ids=clob_token_ids)
        return "", ""
    return str(token_ids[0]), str(token_ids[1])


def parse_market(raw: dict[str, Any]) -> MarketData:
    """Convert a Polymarket market object to MarketData."""
    yes_id, no_id = parse_token_ids(raw.get("clobTokenIds"))
    slug = raw.get("slug", "")
    has_sub_events = len(raw.get("events") or []) > 1
    if raw.get("closed"):
        status = "closed"
    elif raw.get("active", True):
        status = "active"
    else:
        status = "resolved"
    return MarketData(
        id=str(raw.get("id", "")),
        question=raw.get("question") or "",
        thumbnail_url=raw.get("image"),
        yes_token_id=yes_id,
        no_token_id=no_id,
        status=status,
        url=f"https://polymarket.com/{'event' if has_sub_events else 'market'}/{slug}" if slug else None,
    )


class PolymarketProvider(PredictionMarketProvider):
    id = "polymarket"
    name = "Polymarket"
    decimals = 6
    requires_bridging = True

    async def _first_market(self, path: str, params: dict[str, Any] | None = None) -> MarketData | None:
        data = await self._get_json(path, params=params)
        if isinstance(data, dict):
            data = [data]
        if not data:
            return None
        return parse_market(data[0])

    async def get_market_by_id(self, market_id: str) -> MarketData | None:
        """market_id is the market's condition id."""
        return await self._first_market("/polymarket/markets", {"condition_ids": market_id})

    async def get_market_by_outcome_token(self, outcome_token_id: str) -> MarketData | None:
        return await self._first_market("/market", {"outcomeTokenId": outcome_token_id})
