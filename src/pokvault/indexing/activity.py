"""Vault activity merging and share-price APY."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from pokvault.models import VaultActivity

SECONDS_PER_YEAR = 365 * 24 * 60 * 60


def merge_activities(streams: Iterable[Iterable[VaultActivity]]) -> list[VaultActivity]:
    """Flatten activity streams, newest first. Equal timestamps keep stream order."""
    merged = [activity for stream in streams for activity in stream]
    return sorted(merged, key=lambda a: a.timestamp, reverse=True)


def compute_apy(deposits: Sequence[VaultActivity]) -> float:
    """Annualised share-price change between the oldest and newest deposit, in percent.

    Share price is assets / shares of a deposit. Returns 0.0 with fewer than two
    deposits, no elapsed time, or a deposit without assets or shares.
    """
    if len(deposits) < 2:
        return 0.0
    ordered = sorted(deposits, key=lambda d: d.timestamp)
    oldest, newest = ordered[0], ordered[-1]
    years = (newest.timestamp - oldest.timestamp) / SECONDS_PER_YEAR
    if years <= 0 or not oldest.shares or not newest.shares or not oldest.base_amount:
        return 0.0
    first_price = oldest.base_amount / oldest.shares
    last_price = (newest.base_amount or 0) / newest.shares
    total_return = (last_price - first_price) / first_price
    return total_return / years * 100
