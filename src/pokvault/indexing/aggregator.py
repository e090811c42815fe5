"""Group reconciled pairs into logical markets spanning providers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

import structlog

from pokvault.indexing.pair_key import canonical_pair_key, token_lookup_key
from pokvault.indexing.reconcile import reconcile_status
from pokvault.models import (
    STATUS_ALLOWED,
    STATUS_PAUSED,
    Market,
    OutcomeTokenPair,
    PairAddedEvent,
    ProviderTokenIds,
    ResolvedMarketInfo,
)

log = structlog.get_logger(__name__)

UNKNOWN_QUESTION = "Unknown Market"


def create_market_key(legs: Iterable[tuple[str, str]]) -> str:
    """Join (provider_id, market_id) legs sorted by provider id, then market id: "opinion-3019_polymarket-537486"."""
    ordered = sorted(legs)
    return "_".join(f"{provider_id}-{market_id}" for provider_id, market_id in ordered)


def tokens_to_resolve(added_pairs: Iterable[PairAddedEvent]) -> list[dict[str, str]]:
    """Distinct {tokenAddress, outcomeTokenId} entries for both legs of every pair, first-seen order."""
    seen: set[str] = set()
    tokens: list[dict[str, str]] = []
    for pair in added_pairs:
        for address, token_id in (
            (pair.outcome_token_a, pair.outcome_id_a),
            (pair.outcome_token_b, pair.outcome_id_b),
        ):
            key = token_lookup_key(address, token_id)
            if key in seen:
                continue
            seen.add(key)
            tokens.append({"tokenAddress": address, "outcomeTokenId": token_id})
    return tokens


def _populate_provider_data(market: Market, info: ResolvedMarketInfo) -> None:
    pid = info.provider_id
    market.provider_questions[pid] = info.question
    if info.thumbnail_url:
        market.provider_images[pid] = info.thumbnail_url
    if info.yes_token_id or info.no_token_id:
        market.provider_token_ids[pid] = ProviderTokenIds(
            yes_token_id=info.yes_token_id, no_token_id=info.no_token_id
        )
    if info.url:
        market.provider_urls[pid] = info.url


def _new_market(market_key: str, info_a: ResolvedMarketInfo, info_b: ResolvedMarketInfo) -> Market:
    market = Market(
        market_key=market_key,
        question=info_a.question or info_b.question or UNKNOWN_QUESTION,
    )
    _populate_provider_data(market, info_a)
    _populate_provider_data(market, info_b)
    return market


def aggregate_markets(
    added_pairs: Iterable[PairAddedEvent],
    paused: Mapping[str, int],
    removed: Mapping[str, int],
    resolved: Mapping[str, ResolvedMarketInfo],
) -> list[Market]:
    """Build Market entities from added pairs, latest paused/removed timestamps and resolver results.

    Pairs whose legs lack market info or a provider market id are skipped with a warning.
    Result order carries no meaning; use sort_by_recency for display order.
    """
    markets: dict[str, Market] = {}
    for ev in added_pairs:
        pair_key = canonical_pair_key(ev.outcome_token_a, ev.outcome_id_a, ev.outcome_token_b, ev.outcome_id_b)
        status = reconcile_status(ev.timestamp, paused.get(pair_key, 0), removed.get(pair_key, 0))

        info_a = resolved.get(token_lookup_key(ev.outcome_token_a, ev.outcome_id_a))
        info_b = resolved.get(token_lookup_key(ev.outcome_token_b, ev.outcome_id_b))
        if info_a is None or info_b is None:
            log.warning("pair_missing_market_info", pair_key=pair_key)
            continue
        if not info_a.market_id or not info_b.market_id:
            log.warning("pair_missing_market_id", pair_key=pair_key)
            continue

        market_key = create_market_key(
            [(info_a.provider_id, info_a.market_id), (info_b.provider_id, info_b.market_id)]
        )
        market = markets.get(market_key)
        if market is None:
            market = _new_market(market_key, info_a, info_b)
            markets[market_key] = market

        market.pairs.append(
            OutcomeTokenPair(
                key=pair_key,
                outcome_token_a=ev.outcome_token_a,
                outcome_id_a=ev.outcome_id_a,
                outcome_id_a_is_yes_token_id=info_a.yes_token_id == ev.outcome_id_a,
                outcome_token_b=ev.outcome_token_b,
                outcome_id_b=ev.outcome_id_b,
                outcome_id_b_is_yes_token_id=info_b.yes_token_id == ev.outcome_id_b,
                early_exit_amount_contract=ev.early_exit_amount_contract,
                decimals_a=ev.decimals_a,
                decimals_b=ev.decimals_b,
                status=status,
                timestamp=ev.timestamp,
            )
        )

        # allowed > paused > removed; removed is the starting value
        if status == STATUS_ALLOWED:
            market.overall_status = STATUS_ALLOWED
        elif status == STATUS_PAUSED and market.overall_status != STATUS_ALLOWED:
            market.overall_status = STATUS_PAUSED
    return list(markets.values())


def sort_by_recency(markets: Iterable[Market]) -> list[Market]:
    """Newest first, by each market's latest pair timestamp."""
    return sorted(markets, key=lambda m: m.latest_timestamp, reverse=True)
