"""POKVault market index - outcome-token pair discovery, search, and merge/split estimation."""

__version__ = "0.1.0"
