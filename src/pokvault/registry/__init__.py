"""In-memory market store with secondary indexes."""

from pokvault.registry.market_registry import MarketRegistry, PairMatch

__all__ = ["MarketRegistry", "PairMatch"]
