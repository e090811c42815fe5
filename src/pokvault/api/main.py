"""FastAPI backend over MarketIndexService."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pokvault.api.schemas import (
    ErrorResponse,
    HealthResponse,
    MarketResponse,
    MarketsListResponse,
    MergeEstimateResponse,
    PairMatchResponse,
    ProviderMarketResponse,
    RefreshResponse,
    SplitEstimateResponse,
    VaultActivitiesResponse,
    VaultActivityResponse,
    VaultApyResponse,
    VaultLiquidityResponse,
)
from pokvault.config import Settings, get_settings
from pokvault.errors import NotInitializedError, PokVaultError, UpstreamError
from pokvault.indexing.aggregator import sort_by_recency
from pokvault.models import MarketSearchParams, MergeEstimationParams, SplitEstimationParams
from pokvault.service import MarketIndexService, build_service

log = structlog.get_logger(__name__)

_STATUS_PATTERN = "^(allowed|paused|removed)$"

router = APIRouter()


def _error_json(code: str, message: str, status_code: int = 404) -> JSONResponse:
    """Return consistent error JSON: { detail, code }."""
    return JSONResponse(
        status_code=status_code,
        content={"detail": message, "code": code},
    )


def _service(request: Request) -> MarketIndexService:
    return request.app.state.service


@router.get("/health", response_model=HealthResponse)
def health(request: Request) -> HealthResponse:
    service = _service(request)
    return HealthResponse(
        status="ok" if service.initialized else "initializing",
        initialized=service.initialized,
        markets=len(service.registry),
        last_refreshed_at=service.last_refreshed_at,
    )


@router.get("/markets", response_model=MarketsListResponse)
def markets_list(
    request: Request,
    url: str | None = None,
    provider: str | None = None,
    status: str | None = Query(None, pattern=_STATUS_PATTERN),
    question: str | None = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> MarketsListResponse:
    """List markets matching all given filters, newest first, with limit/offset."""
    params = MarketSearchParams(url=url, provider=provider, status=status, question=question)
    all_markets = sort_by_recency(_service(request).search_markets(params))
    markets = all_markets[offset : offset + limit]
    return MarketsListResponse(markets=[MarketResponse.from_market(m) for m in markets], total=len(all_markets))


@router.get(
    "/markets/{market_key}",
    response_model=MarketResponse,
    responses={404: {"model": ErrorResponse}},
)
def market_detail(request: Request, market_key: str):
    market = _service(request).get_market(market_key)
    if market is None:
        return _error_json("not_found", f"Market not found: {market_key}")
    return MarketResponse.from_market(market)


@router.get(
    "/pairs/find",
    response_model=PairMatchResponse,
    responses={404: {"model": ErrorResponse}},
)
def pair_find(
    request: Request,
    token_a: str,
    token_id_a: int = Query(..., ge=0),
    token_b: str = Query(...),
    token_id_b: int = Query(..., ge=0),
):
    """Find the market and pair for two outcome tokens given in either order."""
    try:
        match = _service(request).find_pair(token_a, token_id_a, token_b, token_id_b)
    except ValueError:
        return _error_json("invalid_token_address", "Token addresses must be 20-byte hex addresses", 422)
    if match is None:
        return _error_json("not_found", "Pair not supported by the vault")
    return PairMatchResponse(market=MarketResponse.from_market(match.market), pair=match.pair)


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(request: Request) -> RefreshResponse:
    """Rebuild the index from upstream sources."""
    service = _service(request)
    await service.refresh()
    return RefreshResponse(markets=len(service.registry), last_refreshed_at=service.last_refreshed_at)


@router.get("/vault/liquidity", response_model=VaultLiquidityResponse)
async def vault_liquidity(request: Request) -> VaultLiquidityResponse:
    liq = await _service(request).get_vault_liquidity()
    return VaultLiquidityResponse.from_liquidity(liq)


@router.get(
    "/providers/{provider_id}/markets/{market_id}",
    response_model=ProviderMarketResponse,
    responses={404: {"model": ErrorResponse}},
)
async def provider_market(request: Request, provider_id: str, market_id: str):
    """Look a market up directly at its provider, bypassing the index."""
    market = await _service(request).get_provider_market(provider_id, market_id)
    if market is None:
        return _error_json("not_found", f"Market not found: {provider_id}/{market_id}")
    return ProviderMarketResponse(provider_id=provider_id, **market.model_dump())


@router.get(
    "/vault/activities",
    response_model=VaultActivitiesResponse,
    responses={422: {"model": ErrorResponse}},
)
async def vault_activities(
    request: Request,
    limit: int = Query(100, ge=1, le=1000, description="Most recent events per stream"),
    type: list[str] | None = Query(None, description="Activity types to include; all by default"),
):
    """Vault deposits, withdrawals, pair changes, P&L reports, early exits and splits, newest first."""
    try:
        activities = await _service(request).get_activities(limit, type)
    except ValueError as e:
        return _error_json("invalid_activity_type", str(e), 422)
    return VaultActivitiesResponse(
        activities=[VaultActivityResponse.from_activity(a) for a in activities],
        total=len(activities),
    )


@router.get("/vault/apy", response_model=VaultApyResponse)
async def vault_apy(request: Request, limit: int = Query(100, ge=2, le=1000)) -> VaultApyResponse:
    apy = await _service(request).get_apy(limit)
    return VaultApyResponse(apy=apy, limit=limit)


@router.get("/vault/estimate/merge", response_model=MergeEstimateResponse)
async def vault_estimate_merge(
    request: Request,
    token_a: str,
    token_id_a: int = Query(..., ge=0),
    token_b: str = Query(...),
    token_id_b: int = Query(..., ge=0),
    amount: int = Query(..., ge=0, description="Amount in smallest units"),
) -> MergeEstimateResponse:
    params = MergeEstimationParams(
        token_a=token_a, token_id_a=token_id_a, token_b=token_b, token_id_b=token_id_b, amount=amount
    )
    est = await _service(request).estimate_merge(params)
    return MergeEstimateResponse.from_estimate(est)


@router.get("/vault/estimate/split", response_model=SplitEstimateResponse)
async def vault_estimate_split(
    request: Request,
    token_a: str,
    token_id_a: int = Query(..., ge=0),
    token_b: str = Query(...),
    token_id_b: int = Query(..., ge=0),
    base_amount: int = Query(..., ge=0, description="Base asset amount in smallest units"),
) -> SplitEstimateResponse:
    params = SplitEstimationParams(
        token_a=token_a, token_id_a=token_id_a, token_b=token_b, token_id_b=token_id_b, base_amount=base_amount
    )
    est = await _service(request).estimate_split(params)
    return SplitEstimateResponse.from_estimate(est)


async def _not_initialized_handler(request: Request, exc: NotInitializedError) -> JSONResponse:
    return _error_json("not_initialized", str(exc), 503)


async def _upstream_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    return _error_json("upstream_error", str(exc), 502)


async def _pokvault_handler(request: Request, exc: PokVaultError) -> JSONResponse:
    return _error_json("error", str(exc), 500)


def create_app(service: MarketIndexService | None = None, settings: Settings | None = None) -> FastAPI:
    """Build the app. Without a service one is wired from settings; the index is built on startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        svc = service or build_service(settings or get_settings())
        app.state.service = svc
        try:
            await svc.initialize()
        except PokVaultError as e:
            # keep serving; queries answer 503 until POST /refresh succeeds
            log.error("startup_index_failed", error=str(e))
        yield
        await svc.close()

    app = FastAPI(title="POKVault Market Index API", version="0.1.0", lifespan=lifespan)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.add_exception_handler(NotInitializedError, _not_initialized_handler)
    app.add_exception_handler(UpstreamError, _upstream_handler)
    app.add_exception_handler(PokVaultError, _pokvault_handler)
    app.include_router(router)
    return app


def run_api(
    host: str = "127.0.0.1",
    port: int = 8000,
    profile: str | None = None,
    config_dir: Path | None = None,
) -> None:
    import uvicorn

    from pokvault.config.settings import configure_logging

    settings = get_settings(profile, config_dir)
    configure_logging(settings)
    uvicorn.run(create_app(settings=settings), host=host, port=port, reload=False)
