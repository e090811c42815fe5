"""OutcomeTokenPair, Market - indexed vault entities."""

from __future__ import annotations

from pydantic import BaseModel, Field

STATUS_ALLOWED = "allowed"
STATUS_PAUSED = "paused"
STATUS_REMOVED = "removed"
MARKET_STATUSES = (STATUS_ALLOWED, STATUS_PAUSED, STATUS_REMOVED)

_STATUS_PATTERN = "^(allowed|paused|removed)$"


class OutcomeTokenPair(BaseModel):
    """Two opposite outcome tokens the vault accepts for merge/split.

    Legs are stored in the order the "added" event reported them, not canonical order.
    """

    key: str
    outcome_token_a: str
    outcome_id_a: str
    outcome_id_a_is_yes_token_id: bool = False
    outcome_token_b: str
    outcome_id_b: str
    outcome_id_b_is_yes_token_id: bool = False
    early_exit_amount_contract: str = ""
    decimals_a: int = Field(..., ge=0)
    decimals_b: int = Field(..., ge=0)
    status: str = Field(..., pattern=_STATUS_PATTERN)
    timestamp: int = 0  # unix seconds of the "added" event


class ProviderTokenIds(BaseModel):
    """Yes/No outcome token ids of one provider's market."""

    yes_token_id: str = ""
    no_token_id: str = ""


class Market(BaseModel):
    """Logical prediction-market question spanning one or more providers."""

    market_key: str
    question: str = ""
    provider_questions: dict[str, str] = Field(default_factory=dict)
    provider_images: dict[str, str] = Field(default_factory=dict)
    provider_token_ids: dict[str, ProviderTokenIds] = Field(default_factory=dict)
    provider_urls: dict[str, str] = Field(default_factory=dict)
    pairs: list[OutcomeTokenPair] = Field(default_factory=list)
    overall_status: str = Field(STATUS_REMOVED, pattern=_STATUS_PATTERN)

    @property
    def providers(self) -> list[str]:
        return sorted(self.provider_questions)

    @property
    def latest_timestamp(self) -> int:
        """Newest pair creation time, 0 for a market without pairs."""
        return max((p.timestamp for p in self.pairs), default=0)
