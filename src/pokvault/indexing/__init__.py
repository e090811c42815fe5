"""Pure indexing core: pair identity, status reconciliation, market aggregation."""

from pokvault.indexing.activity import compute_apy, merge_activities
from pokvault.indexing.aggregator import aggregate_markets, create_market_key, sort_by_recency
from pokvault.indexing.pair_key import canonical_pair_key, token_lookup_key
from pokvault.indexing.reconcile import latest_timestamps, reconcile_status

__all__ = [
    "aggregate_markets",
    "canonical_pair_key",
    "compute_apy",
    "create_market_key",
    "latest_timestamps",
    "merge_activities",
    "reconcile_status",
    "sort_by_recency",
    "token_lookup_key",
]
