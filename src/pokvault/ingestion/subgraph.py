"""Vault subgraph client - pair added/paused/removed events over GraphQL."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from pokvault.errors import UpstreamError
from pokvault.indexing.reconcile import latest_timestamps
from pokvault.models import PairAddedEvent, PairStatusEvent

log = structlog.get_logger(__name__)

ADDED_FIELD = "newOppositeOutcomeTokenPairAddeds"
PAUSED_FIELD = "oppositeOutcomeTokenPairPauseds"
REMOVED_FIELD = "oppositeOutcomeTokenPairRemoveds"

NEW_OUTCOME_PAIR_QUERY = """
query GetNewOutcomePairs($first: Int = 100) {
  newOppositeOutcomeTokenPairAddeds(first: $first, orderBy: timestamp_, orderDirection: desc) {
    id
    outcomeIdA
    outcomeIdB
    earlyExitAmountContract
    outcomeTokenA
    outcomeTokenB
    decimalsA
    decimalsB
    block_number
    timestamp_
    transactionHash_
  }
}
"""

_STATUS_QUERY_TEMPLATE = """
query {name}($first: Int = 100) {{
  {field}(first: $first, orderBy: timestamp_, orderDirection: desc) {{
    id
    outcomeIdA
    outcomeIdB
    outcomeTokenA
    outcomeTokenB
    block_number
    timestamp_
    transactionHash_
  }}
}}
"""

PAUSED_OUTCOME_PAIR_QUERY = _STATUS_QUERY_TEMPLATE.format(name="GetPausedOutcomePairs", field=PAUSED_FIELD)
REMOVED_OUTCOME_PAIR_QUERY = _STATUS_QUERY_TEMPLATE.format(name="GetRemovedOutcomePairs", field=REMOVED_FIELD)


def parse_timestamp(raw: dict[str, Any]) -> int:
    return int(raw.get("timestamp_") or raw.get("timestamp") or 0)


def parse_status_event(raw: dict[str, Any]) -> PairStatusEvent:
    """Convert a subgraph paused/removed record to PairStatusEvent."""
    return PairStatusEvent(
        outcome_token_a=str(raw["outcomeTokenA"]),
        outcome_id_a=str(raw["outcomeIdA"]),
        outcome_token_b=str(raw["outcomeTokenB"]),
        outcome_id_b=str(raw["outcomeIdB"]),
        timestamp=parse_timestamp(raw),
    )


def parse_added_event(raw: dict[str, Any]) -> PairAddedEvent:
    """Convert a subgraph pair-added record to PairAddedEvent."""
    return PairAddedEvent(
        outcome_token_a=str(raw["outcomeTokenA"]),
        outcome_id_a=str(raw["outcomeIdA"]),
        outcome_token_b=str(raw["outcomeTokenB"]),
        outcome_id_b=str(raw["outcomeIdB"]),
        early_exit_amount_contract=str(raw.get("earlyExitAmountContract") or ""),
        decimals_a=int(raw.get("decimalsA") or 0),
        decimals_b=int(raw.get("decimalsB") or 0),
        timestamp=parse_timestamp(raw),
    )


class SubgraphClient:
    """Fetches vault pair events from the subgraph. Every call fetches up to page_size records."""

    def __init__(
        self,
        url: str,
        page_size: int = 100,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self.page_size = page_size
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def query(self, query: str, field: str, first: int | None = None) -> list[dict[str, Any]]:
        """Run one query and return the rows under data.<field>; first defaults to page_size."""
        variables = {"first": first if first is not None else self.page_size}
        try:
            resp = await self._client.post(self.url, json={"query": query, "variables": variables})
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            log.error("subgraph_request_failed", field=field, error=str(e))
            raise UpstreamError("subgraph", f"{field} query failed: {e}") from e
        if body.get("errors"):
            log.error("subgraph_query_errors", field=field, errors=body["errors"])
            raise UpstreamError("subgraph", f"{field} query returned errors: {body['errors']}")
        return (body.get("data") or {}).get(field) or []

    async def fetch_added_pairs(self) -> list[PairAddedEvent]:
        rows = await self.query(NEW_OUTCOME_PAIR_QUERY, ADDED_FIELD)
        return [parse_added_event(r) for r in rows]

    async def fetch_paused_events(self) -> list[PairStatusEvent]:
        rows = await self.query(PAUSED_OUTCOME_PAIR_QUERY, PAUSED_FIELD)
        return [parse_status_event(r) for r in rows]

    async def fetch_removed_events(self) -> list[PairStatusEvent]:
        rows = await self.query(REMOVED_OUTCOME_PAIR_QUERY, REMOVED_FIELD)
        return [parse_status_event(r) for r in rows]

    async def fetch_paused_timestamps(self) -> dict[str, int]:
        return latest_timestamps(await self.fetch_paused_events())

    async def fetch_removed_timestamps(self) -> dict[str, int]:
        return latest_timestamps(await self.fetch_removed_events())

    async def close(self) -> None:
        await self._client.aclose()
