"""Collaborator protocols consumed by the market index."""

from __future__ import annotations

from typing import Protocol

from pokvault.models import PairAddedEvent, ResolvedMarketInfo


class EventSource(Protocol):
    """Vault pair event streams (full history up to a page limit, newest first)."""

    async def fetch_added_pairs(self) -> list[PairAddedEvent]: ...
    async def fetch_paused_timestamps(self) -> dict[str, int]: ...
    async def fetch_removed_timestamps(self) -> dict[str, int]: ...


class MarketInfoResolver(Protocol):
    """Batch lookup of provider market metadata per outcome token.

    Keys of the result are token_lookup_key(address, token id); unresolvable tokens are absent.
    """

    async def resolve_batch(self, tokens: list[dict[str, str]]) -> dict[str, ResolvedMarketInfo]: ...
