"""Vault activity feed - deposits, withdrawals, pair lifecycle, P&L, early exits and splits."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import Any

import structlog

from pokvault.indexing.activity import merge_activities
from pokvault.ingestion.subgraph import (
    ADDED_FIELD,
    NEW_OUTCOME_PAIR_QUERY,
    PAUSED_FIELD,
    PAUSED_OUTCOME_PAIR_QUERY,
    REMOVED_FIELD,
    REMOVED_OUTCOME_PAIR_QUERY,
    SubgraphClient,
    parse_timestamp,
)
from pokvault.models import ACTIVITY_TYPES, VaultActivity
from pokvault.models.activity import (
    ACTIVITY_DEPOSIT,
    ACTIVITY_EARLY_EXIT,
    ACTIVITY_NEW_PAIR,
    ACTIVITY_PAUSED_PAIR,
    ACTIVITY_PROFIT_LOSS,
    ACTIVITY_REMOVED_PAIR,
    ACTIVITY_SPLIT,
    ACTIVITY_WITHDRAWAL,
)

log = structlog.get_logger(__name__)

_VAULT_FLOW_TEMPLATE = """
query {name}($first: Int = 100) {{
  {field}(first: $first, orderBy: timestamp_, orderDirection: desc) {{
    id
    owner
    sender
    shares
    assets
    block_number
    timestamp_
    transactionHash_
  }}
}}
"""

_PAIR_AMOUNT_TEMPLATE = """
query {name}($first: Int = 100) {{
  {field}(first: $first, orderBy: timestamp_, orderDirection: desc) {{
    id
    outcomeIdA
    outcomeIdB
    outcomeTokenA
    outcomeTokenB
    {amounts}
    block_number
    timestamp_
    transactionHash_
  }}
}}
"""

DEPOSITS_FIELD = "deposits"
WITHDRAWALS_FIELD = "withdraws"
PROFIT_LOSS_FIELD = "profitOrLossReporteds"
EARLY_EXITS_FIELD = "earlyExits"
SPLITS_FIELD = "splitOppositeOutcomeTokens"

DEPOSITS_QUERY = _VAULT_FLOW_TEMPLATE.format(name="GetDeposits", field=DEPOSITS_FIELD)
WITHDRAWALS_QUERY = _VAULT_FLOW_TEMPLATE.format(name="GetWithdrawals", field=WITHDRAWALS_FIELD)
PROFIT_LOSS_REPORTED_QUERY = _PAIR_AMOUNT_TEMPLATE.format(
    name="GetProfitLossReported", field=PROFIT_LOSS_FIELD, amounts="profitOrLoss"
)
EARLY_EXIT_QUERY = _PAIR_AMOUNT_TEMPLATE.format(
    name="GetEarlyExits", field=EARLY_EXITS_FIELD, amounts="amount\n    exitAmount"
)
SPLIT_OUTCOME_TOKENS_QUERY = _PAIR_AMOUNT_TEMPLATE.format(
    name="GetSplitOutcomeTokens", field=SPLITS_FIELD, amounts="amount"
)

# activity type -> (query, response field)
ACTIVITY_STREAMS: dict[str, tuple[str, str]] = {
    ACTIVITY_DEPOSIT: (DEPOSITS_QUERY, DEPOSITS_FIELD),
    ACTIVITY_WITHDRAWAL: (WITHDRAWALS_QUERY, WITHDRAWALS_FIELD),
    ACTIVITY_NEW_PAIR: (NEW_OUTCOME_PAIR_QUERY, ADDED_FIELD),
    ACTIVITY_REMOVED_PAIR: (REMOVED_OUTCOME_PAIR_QUERY, REMOVED_FIELD),
    ACTIVITY_PAUSED_PAIR: (PAUSED_OUTCOME_PAIR_QUERY, PAUSED_FIELD),
    ACTIVITY_PROFIT_LOSS: (PROFIT_LOSS_REPORTED_QUERY, PROFIT_LOSS_FIELD),
    ACTIVITY_EARLY_EXIT: (EARLY_EXIT_QUERY, EARLY_EXITS_FIELD),
    ACTIVITY_SPLIT: (SPLIT_OUTCOME_TOKENS_QUERY, SPLITS_FIELD),
}

# record field holding the base asset amount, per activity type
_BASE_AMOUNT_FIELD = {
    ACTIVITY_DEPOSIT: "assets",
    ACTIVITY_WITHDRAWAL: "assets",
    ACTIVITY_PROFIT_LOSS: "profitOrLoss",
    ACTIVITY_EARLY_EXIT: "exitAmount",
}


def _int_or_none(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def _str_or_none(value: Any) -> str | None:
    return None if value is None else str(value)


def parse_activity(activity_type: str, raw: dict[str, Any]) -> VaultActivity:
    """Convert one subgraph record of the given stream to VaultActivity."""
    amount_field = _BASE_AMOUNT_FIELD.get(activity_type)
    return VaultActivity(
        id=str(raw.get("id", "")),
        type=activity_type,
        timestamp=parse_timestamp(raw),
        transaction_hash=str(raw.get("transactionHash_") or ""),
        user=str(raw.get("sender") or ""),
        outcome_token_a=_str_or_none(raw.get("outcomeTokenA")),
        outcome_id_a=_str_or_none(raw.get("outcomeIdA")),
        outcome_token_b=_str_or_none(raw.get("outcomeTokenB")),
        outcome_id_b=_str_or_none(raw.get("outcomeIdB")),
        outcome_tokens_amount=_int_or_none(raw.get("amount")),
        base_amount=_int_or_none(raw.get(amount_field)) if amount_field else None,
        shares=_int_or_none(raw.get("shares")),
    )


class ActivityFeed:
    """Reads the vault's event streams from the subgraph and merges them newest first."""

    def __init__(self, subgraph: SubgraphClient) -> None:
        self.subgraph = subgraph

    async def fetch_stream(self, activity_type: str, limit: int | None = None) -> list[VaultActivity]:
        query, field = ACTIVITY_STREAMS[activity_type]
        rows = await self.subgraph.query(query, field, first=limit)
        return [parse_activity(activity_type, r) for r in rows]

    async def fetch_activities(
        self, limit: int | None = None, types: Iterable[str] | None = None
    ) -> list[VaultActivity]:
        """Up to limit most recent events of each requested stream (all streams by default)."""
        selected = list(types) if types else list(ACTIVITY_TYPES)
        unknown = [t for t in selected if t not in ACTIVITY_STREAMS]
        if unknown:
            raise ValueError(f"unknown activity types: {', '.join(unknown)}")
        streams = await asyncio.gather(*(self.fetch_stream(t, limit) for t in selected))
        activities = merge_activities(streams)
        log.info("vault_activities_fetched", streams=len(selected), activities=len(activities))
        return activities

    async def fetch_deposits(self, limit: int | None = None) -> list[VaultActivity]:
        return await self.fetch_stream(ACTIVITY_DEPOSIT, limit)
