"""Grouping reconciled pairs into cross-provider markets."""

from factories import OPINION_TOKEN, POLYMARKET_TOKEN, added, resolved_pair
from pokvault.indexing.aggregator import (
    UNKNOWN_QUESTION,
    aggregate_markets,
    create_market_key,
    sort_by_recency,
    tokens_to_resolve,
)
from pokvault.indexing.pair_key import canonical_pair_key
from pokvault.models import Market, ResolvedMarketInfo


def test_create_market_key_sorts_by_provider():
    assert create_market_key([("polymarket", "537486"), ("opinion", "3019")]) == "opinion-3019_polymarket-537486"
    assert create_market_key([("opinion", "3019"), ("polymarket", "537486")]) == "opinion-3019_polymarket-537486"


def test_create_market_key_same_provider_orders_by_market_id():
    assert create_market_key([("unknown", "b"), ("unknown", "a")]) == "unknown-a_unknown-b"
    assert create_market_key([("unknown", "a"), ("unknown", "b")]) == "unknown-a_unknown-b"


def test_same_pair_in_either_leg_order_groups_when_providers_are_unknown():
    resolved = {
        f"{OPINION_TOKEN.lower()}-111": ResolvedMarketInfo(provider_id="unknown", market_id="m-b", question="Q"),
        f"{POLYMARKET_TOKEN.lower()}-222": ResolvedMarketInfo(provider_id="unknown", market_id="m-a", question="Q"),
    }
    forward = added()
    reverse = added(token_a=POLYMARKET_TOKEN, id_a="222", token_b=OPINION_TOKEN, id_b="111", ts=1100)

    [m_forward] = aggregate_markets([forward], {}, {}, resolved)
    [m_reverse] = aggregate_markets([reverse], {}, {}, resolved)
    assert m_forward.market_key == m_reverse.market_key == "unknown-m-a_unknown-m-b"

    [both] = aggregate_markets([forward, reverse], {}, {}, resolved)
    assert len(both.pairs) == 2


def test_pairs_of_same_markets_group_into_one_market():
    resolved = resolved_pair()
    # second pair is the No token of each side; they resolve to the same two markets
    resolved[f"{OPINION_TOKEN.lower()}-999"] = resolved[f"{OPINION_TOKEN.lower()}-111"]
    resolved[f"{POLYMARKET_TOKEN.lower()}-888"] = resolved[f"{POLYMARKET_TOKEN.lower()}-222"]
    events = [added(ts=1000), added(id_a="999", id_b="888", ts=1100)]

    markets = aggregate_markets(events, {}, {}, resolved)

    assert len(markets) == 1
    m = markets[0]
    assert m.market_key == "opinion-3019_polymarket-537486"
    assert len(m.pairs) == 2
    assert m.overall_status == "allowed"
    assert m.providers == ["opinion", "polymarket"]
    assert m.provider_urls["polymarket"] == "https://polymarket.com/market/btc-100k"
    assert m.provider_images == {"opinion": "https://img.example/opinion.png"}
    assert m.provider_token_ids["opinion"].no_token_id == "999"
    yes_pair, no_pair = m.pairs
    assert yes_pair.outcome_id_a_is_yes_token_id and yes_pair.outcome_id_b_is_yes_token_id
    assert not no_pair.outcome_id_a_is_yes_token_id and not no_pair.outcome_id_b_is_yes_token_id


def test_pair_keeps_event_leg_order_and_canonical_key():
    ev = added(token_a=POLYMARKET_TOKEN, id_a="222", token_b=OPINION_TOKEN, id_b="111")
    [m] = aggregate_markets([ev], {}, {}, resolved_pair())
    pair = m.pairs[0]
    assert pair.outcome_token_a == POLYMARKET_TOKEN
    assert pair.outcome_id_a == "222"
    assert pair.key == canonical_pair_key(OPINION_TOKEN, 111, POLYMARKET_TOKEN, 222)
    assert pair.decimals_a == 18 and pair.decimals_b == 6
    assert m.market_key == "opinion-3019_polymarket-537486"


def test_question_prefers_first_leg_then_second_then_unknown():
    resolved = resolved_pair()
    [m] = aggregate_markets([added()], {}, {}, resolved)
    assert m.question == "Will BTC close above 100k?"

    for key, info in resolved.items():
        if info.provider_id == "opinion":
            resolved[key] = info.model_copy(update={"question": ""})
    [m] = aggregate_markets([added()], {}, {}, resolved)
    assert m.question == "BTC above $100k by year end?"

    blank = {k: v.model_copy(update={"question": ""}) for k, v in resolved.items()}
    [m] = aggregate_markets([added()], {}, {}, blank)
    assert m.question == UNKNOWN_QUESTION


def test_pair_without_market_info_is_skipped():
    resolved = resolved_pair()
    del resolved[f"{POLYMARKET_TOKEN.lower()}-222"]
    assert aggregate_markets([added()], {}, {}, resolved) == []


def test_pair_without_market_id_is_skipped():
    resolved = resolved_pair(polymarket_market="")
    assert aggregate_markets([added()], {}, {}, resolved) == []


def test_overall_status_precedence():
    resolved = resolved_pair()
    resolved.update(resolved_pair(opinion_id="112", polymarket_id="223"))
    resolved.update(resolved_pair(opinion_id="113", polymarket_id="224"))
    events = [
        added(ts=1000),
        added(id_a="112", id_b="223", ts=1000),
        added(id_a="113", id_b="224", ts=1000),
    ]
    k1 = canonical_pair_key(OPINION_TOKEN, 111, POLYMARKET_TOKEN, 222)
    k2 = canonical_pair_key(OPINION_TOKEN, 112, POLYMARKET_TOKEN, 223)
    k3 = canonical_pair_key(OPINION_TOKEN, 113, POLYMARKET_TOKEN, 224)

    # all removed
    [m] = aggregate_markets(events, {}, {k1: 2000, k2: 2000, k3: 2000}, resolved)
    assert m.overall_status == "removed"
    assert [p.status for p in m.pairs] == ["removed", "removed", "removed"]

    # one paused, rest removed
    [m] = aggregate_markets(events, {k2: 1500}, {k1: 2000, k3: 2000}, resolved)
    assert m.overall_status == "paused"

    # allowed pair first, paused after it: stays allowed
    [m] = aggregate_markets(events, {k2: 1500}, {k3: 2000}, resolved)
    assert m.overall_status == "allowed"
    assert [p.status for p in m.pairs] == ["allowed", "paused", "removed"]


def test_tokens_to_resolve_dedupes_in_first_seen_order():
    events = [added(), added(id_b="333"), added(token_a=OPINION_TOKEN.lower())]
    tokens = tokens_to_resolve(events)
    assert tokens == [
        {"tokenAddress": OPINION_TOKEN, "outcomeTokenId": "111"},
        {"tokenAddress": POLYMARKET_TOKEN, "outcomeTokenId": "222"},
        {"tokenAddress": POLYMARKET_TOKEN, "outcomeTokenId": "333"},
    ]


def test_unknown_provider_legs_still_group():
    resolved = {
        k: ResolvedMarketInfo(**{**v.model_dump(), "provider_id": "unknown"}) if v.provider_id == "polymarket" else v
        for k, v in resolved_pair().items()
    }
    [m] = aggregate_markets([added()], {}, {}, resolved)
    assert m.market_key == "opinion-3019_unknown-537486"


def test_sort_by_recency():
    old = Market(market_key="a", pairs=[])
    [newer] = aggregate_markets([added(ts=5000)], {}, {}, resolved_pair())
    [older] = aggregate_markets([added(ts=100)], {}, {}, resolved_pair())
    older = older.model_copy(update={"market_key": "b"})
    assert [m.market_key for m in sort_by_recency([old, older, newer])] == [newer.market_key, "b", "a"]
