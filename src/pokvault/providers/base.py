"""Prediction market provider capability - one implementation per platform."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx
import structlog

from pokvault.errors import UpstreamError
from pokvault.models import MarketData

log = structlog.get_logger(__name__)


class PredictionMarketProvider(ABC):
    """Platform whose ERC-1155 outcome tokens the vault accepts.

    Lookups return None when the platform does not know the market; transport
    failures raise UpstreamError.
    """

    id: str = ""
    name: str = ""
    decimals: int = 18
    requires_bridging: bool = False

    def __init__(self, erc1155_address: str, middleware_base_url: str, client: httpx.AsyncClient) -> None:
        self.erc1155_address = erc1155_address
        self.base_url = middleware_base_url.rstrip("/")
        self._client = client

    async def _get_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        allow_error_status: bool = False,
    ) -> Any:
        """GET base_url + path. None on 404 (or any 4xx/5xx when allow_error_status)."""
        try:
            resp = await self._client.get(self.base_url + path, params=params, headers=headers)
            if resp.status_code == 404 or (allow_error_status and resp.is_error):
                log.info("provider_market_not_found", provider=self.id, path=path, status=resp.status_code)
                return None
            resp.raise_for_status()
            return resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError(self.id, f"GET {path} failed: {e}") from e

    @abstractmethod
    async def get_market_by_id(self, market_id: str) -> MarketData | None:
        """Fetch a market by the platform's own market id."""
        ...

    @abstractmethod
    async def get_market_by_outcome_token(self, outcome_token_id: str) -> MarketData | None:
        """Fetch the market an outcome token id belongs to."""
        ...
