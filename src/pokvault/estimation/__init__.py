"""Vault estimation: merge/split projections and liquidity reads."""

from pokvault.estimation.service import EstimationService
from pokvault.estimation.vault import VaultReader, Web3VaultReader

__all__ = ["EstimationService", "VaultReader", "Web3VaultReader"]
