"""SubgraphClient over an httpx mock transport."""

import asyncio
import json

import httpx
import pytest

from factories import OPINION_TOKEN, POLYMARKET_TOKEN
from pokvault.errors import UpstreamError
from pokvault.indexing.pair_key import canonical_pair_key
from pokvault.ingestion.subgraph import ADDED_FIELD, PAUSED_FIELD, REMOVED_FIELD, SubgraphClient

URL = "https://subgraph.example/gn"


def _row(ts, **extra):
    row = {
        "id": "0x1",
        "outcomeTokenA": OPINION_TOKEN,
        "outcomeIdA": "111",
        "outcomeTokenB": POLYMARKET_TOKEN,
        "outcomeIdB": "222",
        "timestamp_": str(ts),
        "block_number": "1",
        "transactionHash_": "0xabc",
    }
    row.update(extra)
    return row


def _client(handler):
    return SubgraphClient(URL, page_size=50, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def test_fetch_added_pairs_parses_rows():
    seen = []

    def handler(request):
        body = json.loads(request.content)
        seen.append(body)
        rows = [_row(1000, earlyExitAmountContract="0xdead", decimalsA="18", decimalsB="6")]
        return httpx.Response(200, json={"data": {ADDED_FIELD: rows}})

    [ev] = asyncio.run(_client(handler).fetch_added_pairs())
    assert ev.outcome_token_a == OPINION_TOKEN
    assert ev.outcome_id_b == "222"
    assert ev.decimals_a == 18 and ev.decimals_b == 6
    assert ev.early_exit_amount_contract == "0xdead"
    assert ev.timestamp == 1000
    assert seen[0]["variables"] == {"first": 50}
    assert ADDED_FIELD in seen[0]["query"]


def test_paused_and_removed_timestamps_keep_latest():
    def handler(request):
        query = json.loads(request.content)["query"]
        if PAUSED_FIELD in query:
            return httpx.Response(200, json={"data": {PAUSED_FIELD: [_row(900), _row(1500)]}})
        return httpx.Response(200, json={"data": {REMOVED_FIELD: []}})

    client = _client(handler)
    key = canonical_pair_key(OPINION_TOKEN, 111, POLYMARKET_TOKEN, 222)
    assert asyncio.run(client.fetch_paused_timestamps()) == {key: 1500}
    assert asyncio.run(client.fetch_removed_timestamps()) == {}


def test_missing_data_is_empty():
    client = _client(lambda request: httpx.Response(200, json={"data": None}))
    assert asyncio.run(client.fetch_added_pairs()) == []


def test_http_error_raises_upstream():
    client = _client(lambda request: httpx.Response(500, text="oops"))
    with pytest.raises(UpstreamError) as exc:
        asyncio.run(client.fetch_added_pairs())
    assert exc.value.source == "subgraph"


def test_graphql_errors_raise_upstream():
    client = _client(lambda request: httpx.Response(200, json={"errors": [{"message": "bad field"}]}))
    with pytest.raises(UpstreamError, match="bad field"):
        asyncio.run(client.fetch_paused_events())
