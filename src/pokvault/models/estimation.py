"""Merge/split estimation requests and results. Amounts are integers in smallest units."""

from __future__ import annotations

from pydantic import BaseModel, Field


class _PairLegs(BaseModel):
    token_a: str
    token_id_a: int = Field(..., ge=0)
    token_b: str
    token_id_b: int = Field(..., ge=0)


class MergeEstimationParams(_PairLegs):
    amount: int = Field(..., ge=0)


class SplitEstimationParams(_PairLegs):
    base_amount: int = Field(..., ge=0)


class MergeEstimate(BaseModel):
    """Early-exit (merge) projection against current vault liquidity."""

    estimated_receive_amount: int
    vault_has_liquidity: bool
    available_vault_liquidity: int
    total_assets: int
    total_reserved: int


class SplitEstimate(BaseModel):
    """Split projection against the vault's holdings of both legs."""

    estimated_tokens_received: int
    vault_has_tokens: bool
    vault_balance_token_a: int
    vault_balance_token_b: int


class VaultLiquidity(BaseModel):
    total_assets: int
    total_reserved: int
    available_liquidity: int
