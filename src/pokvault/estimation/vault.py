"""On-chain reads of the early-exit vault and ERC-1155 balances."""

from __future__ import annotations

from typing import Any, Protocol

import structlog
from web3 import AsyncWeb3, Web3

from pokvault.errors import UpstreamError
from pokvault.estimation.abi import EARLY_EXIT_VAULT_ABI, ERC1155_ABI

log = structlog.get_logger(__name__)


class VaultReader(Protocol):
    """View-function reads. A None result means the chain returned nothing for the call."""

    vault_address: str

    async def estimate_early_exit_amount(
        self, token_a: str, token_id_a: int, token_b: str, token_id_b: int, amount: int
    ) -> int | None: ...

    async def estimate_split_amount(
        self, token_a: str, token_id_a: int, token_b: str, token_id_b: int, base_amount: int
    ) -> int | None: ...

    async def total_assets(self) -> int | None: ...

    async def total_reserved(self) -> int | None: ...

    async def balance_of(self, token: str, owner: str, token_id: int) -> int | None: ...

    async def close(self) -> None: ...


class Web3VaultReader:
    """VaultReader backed by web3.py's AsyncWeb3 over HTTP JSON-RPC."""

    def __init__(self, rpc_url: str, vault_address: str, w3: AsyncWeb3 | None = None) -> None:
        self.rpc_url = rpc_url
        self.vault_address = Web3.to_checksum_address(vault_address)
        self._w3 = w3 or AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))
        self._vault = self._w3.eth.contract(address=self.vault_address, abi=EARLY_EXIT_VAULT_ABI)

    async def _call(self, fn: Any, label: str) -> int | None:
        try:
            return await fn.call()
        except Exception as e:
            log.error("vault_read_failed", call=label, error=str(e))
            raise UpstreamError("rpc", f"{label} failed: {e}") from e

    async def estimate_early_exit_amount(
        self, token_a: str, token_id_a: int, token_b: str, token_id_b: int, amount: int
    ) -> int | None:
        fn = self._vault.functions.estimateEarlyExitAmount(
            Web3.to_checksum_address(token_a), token_id_a, Web3.to_checksum_address(token_b), token_id_b, amount
        )
        return await self._call(fn, "estimateEarlyExitAmount")

    async def estimate_split_amount(
        self, token_a: str, token_id_a: int, token_b: str, token_id_b: int, base_amount: int
    ) -> int | None:
        fn = self._vault.functions.estimateSplitOppositeOutcomeTokensAmount(
            Web3.to_checksum_address(token_a), token_id_a, Web3.to_checksum_address(token_b), token_id_b, base_amount
        )
        return await self._call(fn, "estimateSplitOppositeOutcomeTokensAmount")

    async def total_assets(self) -> int | None:
        return await self._call(self._vault.functions.totalAssets(), "totalAssets")

    async def total_reserved(self) -> int | None:
        return await self._call(self._vault.functions.totalEarlyExitedAmount(), "totalEarlyExitedAmount")

    async def balance_of(self, token: str, owner: str, token_id: int) -> int | None:
        erc1155 = self._w3.eth.contract(address=Web3.to_checksum_address(token), abi=ERC1155_ABI)
        fn = erc1155.functions.balanceOf(Web3.to_checksum_address(owner), token_id)
        return await self._call(fn, "balanceOf")

    async def close(self) -> None:
        """Disconnect the provider's HTTP session."""
        await self._w3.provider.disconnect()
