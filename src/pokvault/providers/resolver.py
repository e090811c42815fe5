"""Market info resolution by fanning out to the owning provider of each token."""

from __future__ import annotations

import asyncio

import structlog

from pokvault.indexing.pair_key import token_lookup_key
from pokvault.models import MarketData, ResolvedMarketInfo
from pokvault.providers.registry import ProviderRegistry

log = structlog.get_logger(__name__)


def to_resolved_info(provider_id: str, data: MarketData) -> ResolvedMarketInfo:
    return ResolvedMarketInfo(
        provider_id=provider_id,
        market_id=data.id,
        question=data.question,
        yes_token_id=data.yes_token_id,
        no_token_id=data.no_token_id,
        thumbnail_url=data.thumbnail_url,
        url=data.url,
    )


class ProviderResolver:
    """Resolves tokens through the provider registry, one concurrent lookup per distinct token."""

    def __init__(self, registry: ProviderRegistry) -> None:
        self.registry = registry

    async def _resolve_one(self, address: str, token_id: str) -> ResolvedMarketInfo | None:
        provider = self.registry.get_by_token_address(address)
        if provider is None:
            log.warning("no_provider_for_token", token_address=address)
            return None
        data = await provider.get_market_by_outcome_token(token_id)
        if data is None:
            log.warning("provider_returned_no_market", provider=provider.id, token_id=token_id)
            return None
        return to_resolved_info(provider.id, data)

    async def resolve_batch(self, tokens: list[dict[str, str]]) -> dict[str, ResolvedMarketInfo]:
        distinct: dict[str, tuple[str, str]] = {}
        for t in tokens:
            key = token_lookup_key(t["tokenAddress"], t["outcomeTokenId"])
            distinct.setdefault(key, (t["tokenAddress"], str(t["outcomeTokenId"])))
        results = await asyncio.gather(*(self._resolve_one(a, tid) for a, tid in distinct.values()))
        return {key: info for key, info in zip(distinct, results) if info is not None}
