"""MarketRegistry - markets by key, with URL, provider and token-pair indexes."""

from __future__ import annotations

from typing import NamedTuple

from pokvault.indexing.pair_key import canonical_pair_key
from pokvault.models import Market, MarketSearchParams, OutcomeTokenPair


class PairMatch(NamedTuple):
    market: Market
    pair: OutcomeTokenPair


def _same_leg(address: str, token_id: str, other_address: str, other_id: str) -> bool:
    return address.lower() == other_address.lower() and token_id == other_id


class MarketRegistry:
    """Holds the markets of one rebuild. Indexes are derived from the markets and cleared with them.

    Lookups never raise on missing keys; they return None or an empty list.
    """

    def __init__(self) -> None:
        self._markets: dict[str, Market] = {}
        self._url_index: dict[str, set[str]] = {}  # lower-cased url -> market keys
        self._provider_index: dict[str, set[str]] = {}  # provider id -> market keys
        self._pair_index: dict[str, str] = {}  # canonical pair key -> market key

    def __len__(self) -> int:
        return len(self._markets)

    def _index_entries(self, market: Market):
        urls = [url.lower() for url in market.provider_urls.values()]
        providers = [provider_id.lower() for provider_id in market.provider_questions]
        pair_keys = [
            canonical_pair_key(p.outcome_token_a, p.outcome_id_a, p.outcome_token_b, p.outcome_id_b)
            for p in market.pairs
        ]
        return urls, providers, pair_keys

    def _unindex(self, market: Market) -> None:
        key = market.market_key
        urls, providers, pair_keys = self._index_entries(market)
        for index, entries in ((self._url_index, urls), (self._provider_index, providers)):
            for entry in entries:
                keys = index.get(entry)
                if keys is None:
                    continue
                keys.discard(key)
                if not keys:
                    del index[entry]
        for pair_key in pair_keys:
            if self._pair_index.get(pair_key) == key:
                del self._pair_index[pair_key]

    def add_market(self, market: Market) -> None:
        """Insert or replace by market key; a replaced market's index entries are dropped first."""
        key = market.market_key
        previous = self._markets.get(key)
        if previous is not None:
            self._unindex(previous)
        self._markets[key] = market
        urls, providers, pair_keys = self._index_entries(market)
        for url in urls:
            self._url_index.setdefault(url, set()).add(key)
        for provider_id in providers:
            self._provider_index.setdefault(provider_id, set()).add(key)
        for pair_key in pair_keys:
            self._pair_index[pair_key] = key

    def get_all_markets(self) -> list[Market]:
        return list(self._markets.values())

    def get_market_by_key(self, market_key: str) -> Market | None:
        return self._markets.get(market_key)

    def search_by_url(self, url_pattern: str) -> list[Market]:
        """Markets with a URL containing the pattern, or contained in it."""
        pattern = url_pattern.lower()
        matched: dict[str, None] = {}
        for url, keys in self._url_index.items():
            if pattern in url or url in pattern:
                for key in keys:
                    matched[key] = None
        return [self._markets[k] for k in matched if k in self._markets]

    def search_markets(self, params: MarketSearchParams | None = None) -> list[Market]:
        """Apply url, provider, status and question filters conjunctively."""
        params = params or MarketSearchParams()
        results = self.get_all_markets()

        if params.url:
            url_keys = {m.market_key for m in self.search_by_url(params.url)}
            results = [m for m in results if m.market_key in url_keys]

        if params.provider:
            provider_keys = self._provider_index.get(params.provider.lower())
            if provider_keys is None:
                return []
            results = [m for m in results if m.market_key in provider_keys]

        if params.status:
            results = [m for m in results if m.overall_status == params.status]

        if params.question:
            query = params.question.lower()
            results = [
                m
                for m in results
                if query in m.question.lower()
                or any(query in q.lower() for q in m.provider_questions.values())
            ]
        return results

    def find_pair_by_tokens(
        self,
        token_a: str,
        token_id_a: str | int,
        token_b: str,
        token_id_b: str | int,
    ) -> PairMatch | None:
        """Locate a pair by its legs in either order."""
        id_a, id_b = str(int(token_id_a)), str(int(token_id_b))
        market_key = self._pair_index.get(canonical_pair_key(token_a, id_a, token_b, id_b))
        if market_key is None:
            return None
        market = self._markets.get(market_key)
        if market is None:
            return None
        for pair in market.pairs:
            forward = _same_leg(pair.outcome_token_a, pair.outcome_id_a, token_a, id_a) and _same_leg(
                pair.outcome_token_b, pair.outcome_id_b, token_b, id_b
            )
            reverse = _same_leg(pair.outcome_token_a, pair.outcome_id_a, token_b, id_b) and _same_leg(
                pair.outcome_token_b, pair.outcome_id_b, token_a, id_a
            )
            if forward or reverse:
                return PairMatch(market, pair)
        return None

    def clear(self) -> None:
        self._markets = {}
        self._url_index = {}
        self._provider_index = {}
        self._pair_index = {}
