"""Opinion provider - native BSC outcome tokens."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from pokvault.models import MarketData
from pokvault.providers.base import PredictionMarketProvider

log = structlog.get_logger(__name__)


def parse_market(raw: dict[str, Any]) -> MarketData:
    """Convert an Opinion market object (regular or categorical) to MarketData."""
    market_id = str(raw.get("marketId", ""))
    parent_id = raw.get("parentMarketId")
    return MarketData(
        id=market_id,
        question=raw.get("marketTitle") or "",
        thumbnail_url=raw.get("thumbnailUrl") or raw.get("parentThumbnailUrl"),
        yes_token_id=str(raw.get("yesTokenId") or ""),
        no_token_id=str(raw.get("noTokenId") or ""),
        status="active",
        url=f"https://www.opinion.xyz/market/{market_id}",
        parent_market_id=str(parent_id) if parent_id else None,
    )


class OpinionProvider(PredictionMarketProvider):
    id = "opinion"
    name = "Opinion"
    decimals = 18
    requires_bridging = False

    def __init__(
        self,
        erc1155_address: str,
        middleware_base_url: str,
        client: httpx.AsyncClient,
        api_key: str = "",
    ) -> None:
        super().__init__(erc1155_address, middleware_base_url, client)
        self.api_key = api_key

    async def get_market_by_id(self, market_id: str) -> MarketData | None:
        """Regular market endpoint first, then the categorical one."""
        headers = {"apiKey": self.api_key} if self.api_key else None
        body = await self._get_json(f"/opinion/market/{market_id}", headers=headers, allow_error_status=True)
        is_categorical = False
        if not body or body.get("errno") != 0:
            body = await self._get_json(
                f"/opinion/market/categorical/{market_id}", headers=headers, allow_error_status=True
            )
            if not body or body.get("errno") != 0:
                log.info("opinion_market_not_found", market_id=market_id)
                return None
            is_categorical = True
        data = dict((body.get("result") or {}).get("data") or {})
        if not data:
            return None
        if is_categorical:
            data.setdefault("parentThumbnailUrl", data.get("thumbnailUrl"))
        return parse_market(data)

    async def get_market_by_outcome_token(self, outcome_token_id: str) -> MarketData | None:
        data = await self._get_json("/market", {"outcomeTokenId": outcome_token_id})
        if not data:
            return None
        return parse_market(data)
