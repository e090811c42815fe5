"""Pydantic schemas for API request/response consistency and OpenAPI docs."""

from __future__ import annotations

from pydantic import BaseModel, Field

from pokvault.models import (
    Market,
    MarketData,
    MergeEstimate,
    OutcomeTokenPair,
    ProviderTokenIds,
    SplitEstimate,
    VaultActivity,
    VaultLiquidity,
)


# --- Health ---
class HealthResponse(BaseModel):
    status: str = "ok"
    initialized: bool = False
    markets: int = 0
    last_refreshed_at: float | None = None


# --- Error (consistent shape for 4xx/5xx) ---
class ErrorResponse(BaseModel):
    detail: str = Field(..., description="Human-readable message")
    code: str | None = Field(None, description="Machine-readable code, e.g. not_initialized, not_found")


# --- Markets ---
class MarketResponse(BaseModel):
    """Market plus derived fields for display."""

    market_key: str
    question: str
    providers: list[str] = Field(default_factory=list)
    provider_questions: dict[str, str] = Field(default_factory=dict)
    provider_images: dict[str, str] = Field(default_factory=dict)
    provider_token_ids: dict[str, ProviderTokenIds] = Field(default_factory=dict)
    provider_urls: dict[str, str] = Field(default_factory=dict)
    pairs: list[OutcomeTokenPair] = Field(default_factory=list)
    overall_status: str
    latest_timestamp: int = 0

    @classmethod
    def from_market(cls, market: Market) -> MarketResponse:
        return cls(
            market_key=market.market_key,
            question=market.question,
            providers=market.providers,
            provider_questions=market.provider_questions,
            provider_images=market.provider_images,
            provider_token_ids=market.provider_token_ids,
            provider_urls=market.provider_urls,
            pairs=market.pairs,
            overall_status=market.overall_status,
            latest_timestamp=market.latest_timestamp,
        )


class MarketsListResponse(BaseModel):
    markets: list[MarketResponse]
    total: int


class PairMatchResponse(BaseModel):
    market: MarketResponse
    pair: OutcomeTokenPair


class RefreshResponse(BaseModel):
    markets: int
    last_refreshed_at: float | None = None


# --- Vault (integer amounts as decimal strings) ---
class VaultLiquidityResponse(BaseModel):
    total_assets: str
    total_reserved: str
    available_liquidity: str

    @classmethod
    def from_liquidity(cls, liq: VaultLiquidity) -> VaultLiquidityResponse:
        return cls(
            total_assets=str(liq.total_assets),
            total_reserved=str(liq.total_reserved),
            available_liquidity=str(liq.available_liquidity),
        )


class MergeEstimateResponse(BaseModel):
    estimated_receive_amount: str
    vault_has_liquidity: bool
    available_vault_liquidity: str
    total_assets: str
    total_reserved: str

    @classmethod
    def from_estimate(cls, est: MergeEstimate) -> MergeEstimateResponse:
        return cls(
            estimated_receive_amount=str(est.estimated_receive_amount),
            vault_has_liquidity=est.vault_has_liquidity,
            available_vault_liquidity=str(est.available_vault_liquidity),
            total_assets=str(est.total_assets),
            total_reserved=str(est.total_reserved),
        )


class SplitEstimateResponse(BaseModel):
    estimated_tokens_received: str
    vault_has_tokens: bool
    vault_balance_token_a: str
    vault_balance_token_b: str

    @classmethod
    def from_estimate(cls, est: SplitEstimate) -> SplitEstimateResponse:
        return cls(
            estimated_tokens_received=str(est.estimated_tokens_received),
            vault_has_tokens=est.vault_has_tokens,
            vault_balance_token_a=str(est.vault_balance_token_a),
            vault_balance_token_b=str(est.vault_balance_token_b),
        )


class VaultActivityResponse(BaseModel):
    id: str
    type: str
    timestamp: int
    transaction_hash: str = ""
    user: str = ""
    outcome_token_a: str | None = None
    outcome_id_a: str | None = None
    outcome_token_b: str | None = None
    outcome_id_b: str | None = None
    outcome_tokens_amount: str | None = None
    base_amount: str | None = None
    shares: str | None = None
    market: str | None = None

    @classmethod
    def from_activity(cls, activity: VaultActivity) -> VaultActivityResponse:
        def amount(value: int | None) -> str | None:
            return None if value is None else str(value)

        return cls(
            **activity.model_dump(exclude={"outcome_tokens_amount", "base_amount", "shares"}),
            outcome_tokens_amount=amount(activity.outcome_tokens_amount),
            base_amount=amount(activity.base_amount),
            shares=amount(activity.shares),
        )


class VaultActivitiesResponse(BaseModel):
    activities: list[VaultActivityResponse]
    total: int


class VaultApyResponse(BaseModel):
    apy: float = Field(..., description="Annualised share-price change in percent")
    limit: int = Field(..., description="Most recent deposits considered")


# --- Providers ---
class ProviderMarketResponse(MarketData):
    provider_id: str
