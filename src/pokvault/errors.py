"""Error types raised by the market index."""

from __future__ import annotations


class PokVaultError(Exception):
    """Base class for market index errors."""


class NotInitializedError(PokVaultError):
    """Raised when markets are queried before a successful initialize()."""

    def __init__(self, message: str = "Market index not initialized. Call initialize() first.") -> None:
        super().__init__(message)


class UpstreamError(PokVaultError):
    """An upstream collaborator (subgraph, middleware, provider API, RPC) failed.

    Always raised ``from`` the underlying transport or decoding error.
    """

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source
