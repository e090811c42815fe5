"""Canonical schema (Pydantic) - pairs, markets, events, estimations."""

from pokvault.models.activity import ACTIVITY_TYPES, VaultActivity
from pokvault.models.estimation import (
    MergeEstimate,
    MergeEstimationParams,
    SplitEstimate,
    SplitEstimationParams,
    VaultLiquidity,
)
from pokvault.models.events import PairAddedEvent, PairStatusEvent
from pokvault.models.market import (
    MARKET_STATUSES,
    STATUS_ALLOWED,
    STATUS_PAUSED,
    STATUS_REMOVED,
    Market,
    OutcomeTokenPair,
    ProviderTokenIds,
)
from pokvault.models.resolver import MarketData, ResolvedMarketInfo
from pokvault.models.search import MarketSearchParams

__all__ = [
    "VaultActivity",
    "ACTIVITY_TYPES",
    "Market",
    "OutcomeTokenPair",
    "ProviderTokenIds",
    "PairAddedEvent",
    "PairStatusEvent",
    "MarketData",
    "ResolvedMarketInfo",
    "MarketSearchParams",
    "MergeEstimationParams",
    "MergeEstimate",
    "SplitEstimationParams",
    "SplitEstimate",
    "VaultLiquidity",
    "MARKET_STATUSES",
    "STATUS_ALLOWED",
    "STATUS_PAUSED",
    "STATUS_REMOVED",
]
