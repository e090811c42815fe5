"""Market index service - rebuilds the registry from upstream sources and answers queries."""

from __future__ import annotations

import asyncio
import time

import httpx
import structlog

from pokvault.config.settings import RESOLVER_BATCH, RESOLVER_PROVIDERS, Settings
from pokvault.errors import NotInitializedError, PokVaultError
from pokvault.estimation import EstimationService, Web3VaultReader
from pokvault.indexing.activity import compute_apy
from pokvault.indexing.aggregator import aggregate_markets, tokens_to_resolve
from pokvault.ingestion.activities import ActivityFeed
from pokvault.ingestion.base import EventSource, MarketInfoResolver
from pokvault.ingestion.middleware import MiddlewareResolver
from pokvault.ingestion.subgraph import SubgraphClient
from pokvault.models import (
    Market,
    MarketData,
    MarketSearchParams,
    MergeEstimate,
    MergeEstimationParams,
    SplitEstimate,
    SplitEstimationParams,
    VaultActivity,
    VaultLiquidity,
)
from pokvault.providers.registry import ProviderRegistry, build_provider_registry
from pokvault.providers.resolver import ProviderResolver
from pokvault.registry import MarketRegistry, PairMatch

log = structlog.get_logger(__name__)


class MarketIndexService:
    """Owns the market registry.

    Each rebuild fills a fresh MarketRegistry and swaps it in once complete, so readers
    only ever see the last completed rebuild. Rebuilds must not run concurrently.
    """

    def __init__(
        self,
        events: EventSource,
        resolver: MarketInfoResolver,
        estimator: EstimationService,
        providers: ProviderRegistry | None = None,
        activities: ActivityFeed | None = None,
        http_clients: list[httpx.AsyncClient] | None = None,
    ) -> None:
        self.events = events
        self.resolver = resolver
        self.estimator = estimator
        self.providers = providers
        self.activities = activities
        self._http_clients = http_clients or []
        self._registry = MarketRegistry()
        self._initialized = False
        self.last_refreshed_at: float | None = None

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def registry(self) -> MarketRegistry:
        return self._registry

    async def _build_registry(self) -> MarketRegistry:
        added, paused, removed = await asyncio.gather(
            self.events.fetch_added_pairs(),
            self.events.fetch_paused_timestamps(),
            self.events.fetch_removed_timestamps(),
        )
        tokens = tokens_to_resolve(added)
        resolved = await self.resolver.resolve_batch(tokens)
        markets = aggregate_markets(added, paused, removed, resolved)
        registry = MarketRegistry()
        for market in markets:
            registry.add_market(market)
        log.info(
            "markets_indexed",
            added_pairs=len(added),
            paused=len(paused),
            removed=len(removed),
            tokens=len(tokens),
            resolved=len(resolved),
            markets=len(markets),
        )
        return registry

    async def refresh(self) -> None:
        """Rebuild from upstream. On failure the index is left empty and uninitialized."""
        log.info("markets_refresh_started")
        try:
            registry = await self._build_registry()
        except Exception as e:
            self._registry = MarketRegistry()
            self._initialized = False
            log.error("markets_refresh_failed", error=str(e))
            raise
        self._registry = registry
        self._initialized = True
        self.last_refreshed_at = time.time()

    async def initialize(self) -> None:
        """Build the index once; later calls are no-ops."""
        if self._initialized:
            return
        await self.refresh()

    def _ensure_initialized(self) -> MarketRegistry:
        if not self._initialized:
            raise NotInitializedError()
        return self._registry

    def get_all_markets(self) -> list[Market]:
        return self._ensure_initialized().get_all_markets()

    def get_market(self, market_key: str) -> Market | None:
        return self._ensure_initialized().get_market_by_key(market_key)

    def search_markets(self, params: MarketSearchParams | None = None) -> list[Market]:
        return self._ensure_initialized().search_markets(params)

    def find_markets_by_url(self, url_pattern: str) -> list[Market]:
        return self._ensure_initialized().search_by_url(url_pattern)

    def find_pair(self, token_a: str, token_id_a: str | int, token_b: str, token_id_b: str | int) -> PairMatch | None:
        return self._ensure_initialized().find_pair_by_tokens(token_a, token_id_a, token_b, token_id_b)

    async def estimate_merge(self, params: MergeEstimationParams) -> MergeEstimate:
        return await self.estimator.estimate_merge(params)

    async def estimate_split(self, params: SplitEstimationParams) -> SplitEstimate:
        return await self.estimator.estimate_split(params)

    async def get_vault_liquidity(self) -> VaultLiquidity:
        return await self.estimator.get_vault_liquidity()

    async def get_provider_market(self, provider_id: str, market_id: str) -> MarketData | None:
        """Fetch one market straight from its provider; None for an unknown provider or market."""
        provider = self.providers.get_by_id(provider_id) if self.providers else None
        if provider is None:
            log.info("unknown_provider", provider=provider_id)
            return None
        return await provider.get_market_by_id(market_id)

    def _activity_feed(self) -> ActivityFeed:
        if self.activities is None:
            raise PokVaultError("Vault activity feed is not configured.")
        return self.activities

    def _label_activities(self, activities: list[VaultActivity]) -> None:
        """Attach the indexed market question to pair-related activities, when the index is built."""
        if not self._initialized:
            return
        for activity in activities:
            if not activity.has_pair:
                continue
            match = self._registry.find_pair_by_tokens(
                activity.outcome_token_a, activity.outcome_id_a, activity.outcome_token_b, activity.outcome_id_b
            )
            if match is not None:
                activity.market = match.market.question

    async def get_activities(self, limit: int | None = None, types: list[str] | None = None) -> list[VaultActivity]:
        """Merged vault activity, newest first. Does not require initialize(); labels need it."""
        activities = await self._activity_feed().fetch_activities(limit, types)
        self._label_activities(activities)
        return activities

    async def get_apy(self, limit: int | None = None) -> float:
        """Share-price APY in percent over the last limit deposits."""
        deposits = await self._activity_feed().fetch_deposits(limit)
        return compute_apy(deposits)

    async def close(self) -> None:
        for client in self._http_clients:
            await client.aclose()
        self._http_clients = []
        await self.estimator.close()


def build_service(settings: Settings) -> MarketIndexService:
    """Wire the subgraph, market info resolver, providers and web3 vault reader from settings."""
    choice = settings.market_info_resolver
    if choice not in (RESOLVER_BATCH, RESOLVER_PROVIDERS):
        raise PokVaultError(f"Unknown middleware.resolver {choice!r}; use {RESOLVER_BATCH!r} or {RESOLVER_PROVIDERS!r}.")
    subgraph_http = httpx.AsyncClient(timeout=settings.subgraph_timeout_sec)
    middleware_http = httpx.AsyncClient(timeout=settings.middleware_timeout_sec)
    providers = build_provider_registry(settings, middleware_http)
    events = SubgraphClient(settings.subgraph_url, page_size=settings.subgraph_page_size, client=subgraph_http)
    if choice == RESOLVER_PROVIDERS:
        resolver: MarketInfoResolver = ProviderResolver(providers)
    else:
        resolver = MiddlewareResolver(settings.middleware_base_url, providers, client=middleware_http)
    log.debug("market_info_resolver_selected", resolver=choice)
    estimator = EstimationService(
        Web3VaultReader(settings.rpc_url, settings.vault_address),
        uses_default_rpc=settings.uses_default_rpc,
    )
    return MarketIndexService(
        events,
        resolver,
        estimator,
        providers=providers,
        activities=ActivityFeed(events),
        http_clients=[subgraph_http, middleware_http],
    )
