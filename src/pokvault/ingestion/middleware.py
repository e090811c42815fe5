"""Middleware batch market-info resolver (one POST for all tokens of a rebuild)."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from pokvault.errors import UpstreamError
from pokvault.indexing.pair_key import token_lookup_key
from pokvault.models import ResolvedMarketInfo
from pokvault.providers.registry import ProviderRegistry

log = structlog.get_logger(__name__)

OPINION_TOPIC_URL = "https://app.opinion.trade/detail?topicId={topic_id}"


def construct_provider_url(provider_id: str, market_info: dict[str, Any]) -> str | None:
    """Market URL from the record, or derived for Opinion topics."""
    if market_info.get("url"):
        return market_info["url"]
    if provider_id == "opinion":
        parent = market_info.get("parentMarketId")
        if parent:
            return OPINION_TOPIC_URL.format(topic_id=parent) + "&type=multi"
        if market_info.get("id") is not None:
            return OPINION_TOPIC_URL.format(topic_id=market_info["id"])
    return None


def _id_str(value: Any) -> str:
    return "" if value is None else str(value)


def parse_market_info(provider_id: str, market_info: dict[str, Any]) -> ResolvedMarketInfo:
    """Convert a middleware marketInfo object to ResolvedMarketInfo."""
    return ResolvedMarketInfo(
        provider_id=provider_id,
        market_id=_id_str(market_info.get("id")),
        question=market_info.get("question") or "",
        yes_token_id=_id_str(market_info.get("yesTokenId")),
        no_token_id=_id_str(market_info.get("noTokenId")),
        thumbnail_url=market_info.get("thumbnailUrl") or None,
        url=construct_provider_url(provider_id, market_info),
    )


class MiddlewareResolver:
    """POST {base_url}/markets with every token; provider ids come from the token address."""

    def __init__(
        self,
        base_url: str,
        providers: ProviderRegistry,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.providers = providers
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def resolve_batch(self, tokens: list[dict[str, str]]) -> dict[str, ResolvedMarketInfo]:
        if not tokens:
            return {}
        try:
            resp = await self._client.post(f"{self.base_url}/markets", json={"tokens": tokens})
            resp.raise_for_status()
            rows = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            log.error("market_info_batch_failed", tokens=len(tokens), error=str(e))
            raise UpstreamError("middleware", f"batch market info failed: {e}") from e
        if not isinstance(rows, list):
            raise UpstreamError("middleware", f"unexpected batch response type {type(rows).__name__}")

        resolved: dict[str, ResolvedMarketInfo] = {}
        for row in rows:
            address = str(row.get("tokenAddress") or "")
            token_id = _id_str(row.get("outcomeTokenId"))
            market_info = row.get("marketInfo")
            if not market_info:
                log.warning("no_market_info", token_address=address, token_id=token_id)
                continue
            provider_id = self.providers.provider_id_for(address)
            resolved[token_lookup_key(address, token_id)] = parse_market_info(provider_id, market_info)
        log.info("market_info_resolved", requested=len(tokens), resolved=len(resolved))
        return resolved

    async def close(self) -> None:
        await self._client.aclose()
