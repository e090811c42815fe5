"""ProviderRegistry - providers by ERC-1155 token address and by id."""

from __future__ import annotations

from collections.abc import Iterable

import httpx
import structlog

from pokvault.config.settings import Settings
from pokvault.providers.base import PredictionMarketProvider
from pokvault.providers.opinion import OpinionProvider
from pokvault.providers.polymarket import PolymarketProvider
from pokvault.providers.probable import ProbableProvider

log = structlog.get_logger(__name__)

UNKNOWN_PROVIDER = "unknown"


class ProviderRegistry:
    """Explicitly constructed and passed to consumers; there is no module-level instance."""

    def __init__(
        self,
        providers: Iterable[PredictionMarketProvider] = (),
        address_aliases: dict[str, str] | None = None,
    ) -> None:
        self._by_address: dict[str, PredictionMarketProvider] = {}
        self._by_id: dict[str, PredictionMarketProvider] = {}
        # legacy token address -> provider id
        self._aliases = {addr.lower(): pid.lower() for addr, pid in (address_aliases or {}).items()}
        for provider in providers:
            self.register(provider)

    def register(self, provider: PredictionMarketProvider) -> None:
        address = provider.erc1155_address.lower()
        self._by_address[address] = provider
        self._by_id[provider.id.lower()] = provider
        log.debug("provider_registered", provider=provider.id, address=address)

    def get_by_token_address(self, token_address: str) -> PredictionMarketProvider | None:
        address = token_address.lower()
        alias = self._aliases.get(address)
        if alias is not None:
            return self._by_id.get(alias)
        return self._by_address.get(address)

    def get_by_id(self, provider_id: str) -> PredictionMarketProvider | None:
        return self._by_id.get(provider_id.lower())

    def provider_id_for(self, token_address: str) -> str:
        provider = self.get_by_token_address(token_address)
        return provider.id if provider else UNKNOWN_PROVIDER

    def get_all(self) -> list[PredictionMarketProvider]:
        return list(self._by_id.values())

    def get_bridgeable_providers(self) -> list[PredictionMarketProvider]:
        return [p for p in self.get_all() if p.requires_bridging]

    def get_native_providers(self) -> list[PredictionMarketProvider]:
        return [p for p in self.get_all() if not p.requires_bridging]

    def is_registered(self, token_address: str) -> bool:
        return self.get_by_token_address(token_address) is not None


def build_provider_registry(settings: Settings, client: httpx.AsyncClient) -> ProviderRegistry:
    """Registry with the Polymarket, Opinion and Probable providers from settings."""
    base = settings.middleware_base_url
    return ProviderRegistry(
        [
            PolymarketProvider(settings.polymarket_address, base, client),
            OpinionProvider(settings.opinion_address, base, client, api_key=settings.opinion_api_key),
            ProbableProvider(settings.probable_address, base, client),
        ],
        address_aliases={settings.polymarket_legacy_address: PolymarketProvider.id},
    )
