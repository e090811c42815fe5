"""Pair status from the added/paused/removed event streams. Latest event wins."""

from __future__ import annotations

from collections.abc import Iterable

from pokvault.indexing.pair_key import canonical_pair_key
from pokvault.models import STATUS_ALLOWED, STATUS_PAUSED, STATUS_REMOVED, PairStatusEvent


def reconcile_status(added_ts: int, paused_ts: int, removed_ts: int) -> str:
    """Status of a pair given the latest timestamp of each event kind (0 = never seen).

    Ties never favour removal or pausing: an event must be strictly later than the others.
    """
    if removed_ts > added_ts and removed_ts > paused_ts:
        return STATUS_REMOVED
    if paused_ts > added_ts and paused_ts > removed_ts:
        return STATUS_PAUSED
    return STATUS_ALLOWED


def latest_timestamps(events: Iterable[PairStatusEvent]) -> dict[str, int]:
    """Map canonical pair key -> maximum timestamp seen for that pair."""
    latest: dict[str, int] = {}
    for ev in events:
        key = canonical_pair_key(ev.outcome_token_a, ev.outcome_id_a, ev.outcome_token_b, ev.outcome_id_b)
        if ev.timestamp > latest.get(key, -1):
            latest[key] = ev.timestamp
    return latest
