"""Vault activity feed entries from the subgraph event streams."""

from __future__ import annotations

from pydantic import BaseModel, Field

ACTIVITY_DEPOSIT = "deposit"
ACTIVITY_WITHDRAWAL = "withdrawal"
ACTIVITY_NEW_PAIR = "new-outcome-pair"
ACTIVITY_REMOVED_PAIR = "removed-outcome-pair"
ACTIVITY_PAUSED_PAIR = "paused-outcome-pair"
ACTIVITY_PROFIT_LOSS = "profit-loss-reported"
ACTIVITY_EARLY_EXIT = "early-exit"
ACTIVITY_SPLIT = "split-outcome-tokens"
ACTIVITY_TYPES = (
    ACTIVITY_DEPOSIT,
    ACTIVITY_WITHDRAWAL,
    ACTIVITY_NEW_PAIR,
    ACTIVITY_REMOVED_PAIR,
    ACTIVITY_PAUSED_PAIR,
    ACTIVITY_PROFIT_LOSS,
    ACTIVITY_EARLY_EXIT,
    ACTIVITY_SPLIT,
)

ACTIVITY_TYPE_PATTERN = "^(" + "|".join(ACTIVITY_TYPES) + ")$"


class VaultActivity(BaseModel):
    """One vault event. Fields an event kind does not carry stay None.

    base_amount is the base asset amount: deposited/withdrawn assets, early-exit payout,
    or the signed profit/loss. outcome_tokens_amount is set for early exits and splits.
    """

    id: str
    type: str = Field(..., pattern=ACTIVITY_TYPE_PATTERN)
    timestamp: int = Field(..., ge=0)
    transaction_hash: str = ""
    user: str = ""
    outcome_token_a: str | None = None
    outcome_id_a: str | None = None
    outcome_token_b: str | None = None
    outcome_id_b: str | None = None
    outcome_tokens_amount: int | None = None
    base_amount: int | None = None
    shares: int | None = None
    market: str | None = None  # question of the indexed market the pair belongs to

    @property
    def has_pair(self) -> bool:
        return None not in (self.outcome_token_a, self.outcome_id_a, self.outcome_token_b, self.outcome_id_b)
