"""Merge (early exit) and split estimations against the vault."""

from __future__ import annotations

import asyncio

import structlog

from pokvault.estimation.vault import VaultReader
from pokvault.models import (
    MergeEstimate,
    MergeEstimationParams,
    SplitEstimate,
    SplitEstimationParams,
    VaultLiquidity,
)

log = structlog.get_logger(__name__)


def _int(value: int | None) -> int:
    return int(value) if value is not None else 0


class EstimationService:
    """Read-only projections. Independent reads run concurrently; missing reads count as zero."""

    def __init__(self, reader: VaultReader, uses_default_rpc: bool = False) -> None:
        self.reader = reader
        self.uses_default_rpc = uses_default_rpc

    def _warn_default_rpc(self) -> None:
        if self.uses_default_rpc:
            log.warning(
                "default_rpc_in_use",
                msg="Using the public BSC RPC; set chain.rpc_url in config for better performance.",
            )

    async def estimate_merge(self, params: MergeEstimationParams) -> MergeEstimate:
        self._warn_default_rpc()
        estimated, total_assets, total_reserved = await asyncio.gather(
            self.reader.estimate_early_exit_amount(
                params.token_a, params.token_id_a, params.token_b, params.token_id_b, params.amount
            ),
            self.reader.total_assets(),
            self.reader.total_reserved(),
        )
        estimated, total_assets, total_reserved = _int(estimated), _int(total_assets), _int(total_reserved)
        available = total_assets - total_reserved
        return MergeEstimate(
            estimated_receive_amount=estimated,
            vault_has_liquidity=available >= estimated,
            available_vault_liquidity=available,
            total_assets=total_assets,
            total_reserved=total_reserved,
        )

    async def estimate_split(self, params: SplitEstimationParams) -> SplitEstimate:
        self._warn_default_rpc()
        vault = self.reader.vault_address
        estimated, balance_a, balance_b = await asyncio.gather(
            self.reader.estimate_split_amount(
                params.token_a, params.token_id_a, params.token_b, params.token_id_b, params.base_amount
            ),
            self.reader.balance_of(params.token_a, vault, params.token_id_a),
            self.reader.balance_of(params.token_b, vault, params.token_id_b),
        )
        estimated, balance_a, balance_b = _int(estimated), _int(balance_a), _int(balance_b)
        return SplitEstimate(
            estimated_tokens_received=estimated,
            vault_has_tokens=balance_a >= estimated and balance_b >= estimated,
            vault_balance_token_a=balance_a,
            vault_balance_token_b=balance_b,
        )

    async def get_vault_liquidity(self) -> VaultLiquidity:
        total_assets, total_reserved = await asyncio.gather(
            self.reader.total_assets(), self.reader.total_reserved()
        )
        total_assets, total_reserved = _int(total_assets), _int(total_reserved)
        return VaultLiquidity(
            total_assets=total_assets,
            total_reserved=total_reserved,
            available_liquidity=total_assets - total_reserved,
        )

    async def get_token_balance(self, token: str, token_id: int, owner: str) -> int:
        return _int(await self.reader.balance_of(token, owner, token_id))

    async def close(self) -> None:
        await self.reader.close()
