"""Vault pair events as reported by the subgraph."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PairStatusEvent(BaseModel):
    """Pair paused or removed event."""

    outcome_token_a: str
    outcome_id_a: str
    outcome_token_b: str
    outcome_id_b: str
    timestamp: int = Field(..., ge=0)


class PairAddedEvent(PairStatusEvent):
    """New opposite outcome token pair added to the vault."""

    early_exit_amount_contract: str = ""
    decimals_a: int = Field(0, ge=0)
    decimals_b: int = Field(0, ge=0)
