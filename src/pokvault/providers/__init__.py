"""Prediction market providers (Polymarket, Opinion, Probable) and their registry."""

from pokvault.providers.base import PredictionMarketProvider
from pokvault.providers.opinion import OpinionProvider
from pokvault.providers.polymarket import PolymarketProvider
from pokvault.providers.probable import ProbableProvider
from pokvault.providers.registry import UNKNOWN_PROVIDER, ProviderRegistry, build_provider_registry
from pokvault.providers.resolver import ProviderResolver

__all__ = [
    "PredictionMarketProvider",
    "PolymarketProvider",
    "OpinionProvider",
    "ProbableProvider",
    "ProviderRegistry",
    "ProviderResolver",
    "UNKNOWN_PROVIDER",
    "build_provider_registry",
]
