"""MarketIndexService: initialize, refresh, query guards, estimates, activity and wiring."""

import asyncio

import httpx
import pytest

from factories import (
    OPINION_TOKEN,
    POLYMARKET_TOKEN,
    FakeReader,
    FakeResolver,
    activity,
    added,
    resolved_pair,
    status_event,
)
from pokvault.config import Settings
from pokvault.errors import NotInitializedError, PokVaultError, UpstreamError
from pokvault.estimation import EstimationService
from pokvault.ingestion import ActivityFeed, MiddlewareResolver
from pokvault.models import MarketSearchParams, MergeEstimationParams
from pokvault.providers import PolymarketProvider, ProviderRegistry, ProviderResolver
from pokvault.service import MarketIndexService, build_service


def test_queries_before_initialize_raise(make_service):
    service = make_service()
    assert not service.initialized
    with pytest.raises(NotInitializedError):
        service.get_all_markets()
    with pytest.raises(NotInitializedError):
        service.get_market("opinion-3019_polymarket-537486")
    with pytest.raises(NotInitializedError):
        service.search_markets()
    with pytest.raises(NotInitializedError):
        service.find_markets_by_url("polymarket.com")
    with pytest.raises(NotInitializedError):
        service.find_pair(OPINION_TOKEN, "111", POLYMARKET_TOKEN, "222")


def test_initialize_builds_index(make_service):
    service = make_service(
        added=[added(ts=1000)],
        paused=[status_event(ts=1500), status_event(ts=900)],
        resolved=resolved_pair(),
    )
    asyncio.run(service.initialize())

    assert service.initialized
    assert service.last_refreshed_at is not None
    [m] = service.get_all_markets()
    assert m.market_key == "opinion-3019_polymarket-537486"
    assert m.pairs[0].status == "paused"
    assert m.overall_status == "paused"
    assert service.get_market(m.market_key) is m
    assert service.search_markets(MarketSearchParams(status="paused")) == [m]
    assert service.find_markets_by_url("https://polymarket.com/market/btc-100k") == [m]
    match = service.find_pair(POLYMARKET_TOKEN, 222, OPINION_TOKEN, 111)
    assert match is not None and match.market is m


def test_resolver_called_once_with_distinct_tokens(make_service):
    service = make_service(
        added=[added(), added(id_b="333", ts=2000)],
        resolved=resolved_pair(),
    )
    asyncio.run(service.initialize())
    calls = service.resolver.calls
    assert len(calls) == 1
    assert calls[0] == [
        {"tokenAddress": OPINION_TOKEN, "outcomeTokenId": "111"},
        {"tokenAddress": POLYMARKET_TOKEN, "outcomeTokenId": "222"},
        {"tokenAddress": POLYMARKET_TOKEN, "outcomeTokenId": "333"},
    ]
    # the 333 leg has no market info and is skipped
    [m] = service.get_all_markets()
    assert len(m.pairs) == 1


def test_initialize_is_idempotent(make_service):
    service = make_service(added=[added()], resolved=resolved_pair())
    asyncio.run(service.initialize())
    asyncio.run(service.initialize())
    assert len(service.resolver.calls) == 1


def test_failed_initialize_leaves_service_uninitialized(make_service):
    service = make_service(fail=UpstreamError("subgraph", "boom"))
    with pytest.raises(UpstreamError):
        asyncio.run(service.initialize())
    assert not service.initialized
    assert len(service.registry) == 0
    with pytest.raises(NotInitializedError):
        service.get_all_markets()


def test_refresh_swaps_in_new_registry(make_service):
    service = make_service(added=[added()], resolved=resolved_pair())
    asyncio.run(service.initialize())
    first = service.registry

    service.events.removed = [status_event(ts=5000)]
    asyncio.run(service.refresh())

    assert service.registry is not first
    [m] = service.get_all_markets()
    assert m.overall_status == "removed"
    # old registry untouched
    assert first.get_all_markets()[0].overall_status == "allowed"


def test_failed_refresh_clears_index(make_service):
    service = make_service(added=[added()], resolved=resolved_pair())
    asyncio.run(service.initialize())
    service.events.fail = UpstreamError("subgraph", "down")
    with pytest.raises(UpstreamError):
        asyncio.run(service.refresh())
    assert not service.initialized
    assert len(service.registry) == 0


def test_estimates_do_not_require_initialize(make_service):
    service = make_service()
    est = asyncio.run(
        service.estimate_merge(
            MergeEstimationParams(token_a=OPINION_TOKEN, token_id_a=111, token_b=POLYMARKET_TOKEN, token_id_b=222, amount=10)
        )
    )
    assert est.estimated_receive_amount == 500
    liq = asyncio.run(service.get_vault_liquidity())
    assert liq.available_liquidity == 700


def test_close_releases_vault_reader(make_service, fake_reader):
    service = make_service()
    asyncio.run(service.close())
    assert fake_reader.closed


def test_build_service_uses_batch_resolver_by_default():
    service = build_service(Settings.from_dict({}))
    assert isinstance(service.resolver, MiddlewareResolver)
    assert isinstance(service.activities, ActivityFeed)
    assert service.activities.subgraph is service.events


def test_build_service_selects_provider_resolver():
    service = build_service(Settings.from_dict({"middleware": {"resolver": "providers"}}))
    assert isinstance(service.resolver, ProviderResolver)
    assert service.resolver.registry is service.providers


def test_build_service_rejects_unknown_resolver():
    with pytest.raises(PokVaultError, match="middleware.resolver"):
        build_service(Settings.from_dict({"middleware": {"resolver": "graph"}}))


def _provider_service(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    providers = ProviderRegistry([PolymarketProvider(POLYMARKET_TOKEN, "https://middleware.example/api", client)])
    return MarketIndexService(
        None, FakeResolver(), EstimationService(FakeReader()), providers=providers, http_clients=[client]
    )


def test_get_provider_market_fetches_from_provider():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[{"id": "0xcond", "question": "Q?", "slug": "q", "clobTokenIds": '["1", "2"]'}])

    service = _provider_service(handler)
    market = asyncio.run(service.get_provider_market("polymarket", "0xcond"))

    assert market.id == "0xcond"
    assert market.url == "https://polymarket.com/market/q"
    assert seen[0].url.path == "/api/polymarket/markets"
    assert seen[0].url.params["condition_ids"] == "0xcond"


def test_get_provider_market_unknown_provider_or_market():
    service = _provider_service(lambda request: httpx.Response(404))
    assert asyncio.run(service.get_provider_market("kalshi", "1")) is None
    assert asyncio.run(service.get_provider_market("polymarket", "missing")) is None


def test_activities_without_index_are_unlabelled(make_service):
    service = make_service(
        activities=[
            activity("deposit", ts=10, base_amount=100, shares=100),
            activity("new-outcome-pair", ts=20, with_pair=True),
        ]
    )
    items = asyncio.run(service.get_activities(limit=5))
    assert [a.type for a in items] == ["new-outcome-pair", "deposit"]
    assert all(a.market is None for a in items)
    assert service.activities.calls == [(5, None)]


def test_activities_are_labelled_with_indexed_market(make_service):
    service = make_service(
        added=[added()],
        resolved=resolved_pair(),
        activities=[
            activity("early-exit", ts=30, with_pair=True, outcome_tokens_amount=5, base_amount=4),
            activity("split-outcome-tokens", ts=25, with_pair=True, outcome_id_b="223"),
            activity("withdrawal", ts=20, base_amount=50),
        ],
    )
    asyncio.run(service.initialize())

    types = ["early-exit", "split-outcome-tokens", "withdrawal"]
    exit_, split, withdrawal = asyncio.run(service.get_activities(types=types))
    assert exit_.market == "Will BTC close above 100k?"
    assert split.market is None  # pair not indexed
    assert withdrawal.market is None


def test_get_apy_from_deposits(make_service):
    year = 365 * 24 * 60 * 60
    service = make_service(
        activities=[
            activity("deposit", ts=year, base_amount=110, shares=100),
            activity("deposit", ts=0, base_amount=100, shares=100),
            activity("withdrawal", ts=year // 2, base_amount=1, shares=1),
        ]
    )
    assert asyncio.run(service.get_apy()) == pytest.approx(10.0)


def test_activity_feed_missing_raises(fake_reader):
    service = MarketIndexService(None, FakeResolver(), EstimationService(fake_reader))
    with pytest.raises(PokVaultError, match="not configured"):
        asyncio.run(service.get_activities())
    with pytest.raises(PokVaultError):
        asyncio.run(service.get_apy())
