"""Upstream data sources: vault event streams and market info resolution."""

from pokvault.ingestion.activities import ActivityFeed
from pokvault.ingestion.base import EventSource, MarketInfoResolver
from pokvault.ingestion.middleware import MiddlewareResolver
from pokvault.ingestion.subgraph import SubgraphClient

__all__ = ["ActivityFeed", "EventSource", "MarketInfoResolver", "MiddlewareResolver", "SubgraphClient"]
