"""Vault subcommand: liquidity, estimate-merge, estimate-split, activities, apy."""

from __future__ import annotations

import typer

from pokvault.cli.runner import run_with_service
from pokvault.models import ACTIVITY_TYPES, MergeEstimationParams, SplitEstimationParams

app = typer.Typer(help="Vault liquidity and merge/split estimations")


@app.command("liquidity")
def liquidity(ctx: typer.Context) -> None:
    """Show vault total assets, reserved amount and available liquidity."""
    settings = ctx.obj["settings"]

    async def action(service):
        return await service.get_vault_liquidity()

    liq = run_with_service(settings, action, index=False)
    typer.echo(f"Total assets:        {liq.total_assets}")
    typer.echo(f"Total reserved:      {liq.total_reserved}")
    typer.echo(f"Available liquidity: {liq.available_liquidity}")


@app.command("estimate-merge")
def estimate_merge(
    ctx: typer.Context,
    token_a: str = typer.Argument(...),
    token_id_a: int = typer.Argument(..., min=0),
    token_b: str = typer.Argument(...),
    token_id_b: int = typer.Argument(..., min=0),
    amount: int = typer.Argument(..., min=0, help="Amount in smallest units"),
) -> None:
    """Estimate the base asset received for merging (early exit) a pair."""
    settings = ctx.obj["settings"]
    params = MergeEstimationParams(
        token_a=token_a, token_id_a=token_id_a, token_b=token_b, token_id_b=token_id_b, amount=amount
    )

    async def action(service):
        return await service.estimate_merge(params)

    est = run_with_service(settings, action, index=False)
    typer.echo(f"Estimated receive amount: {est.estimated_receive_amount}")
    typer.echo(f"Available vault liquidity: {est.available_vault_liquidity}")
    typer.echo(f"Vault has liquidity: {est.vault_has_liquidity}")


@app.command("estimate-split")
def estimate_split(
    ctx: typer.Context,
    token_a: str = typer.Argument(...),
    token_id_a: int = typer.Argument(..., min=0),
    token_b: str = typer.Argument(...),
    token_id_b: int = typer.Argument(..., min=0),
    base_amount: int = typer.Argument(..., min=0, help="Base asset amount in smallest units"),
) -> None:
    """Estimate outcome tokens received for splitting a base asset amount."""
    settings = ctx.obj["settings"]
    params = SplitEstimationParams(
        token_a=token_a, token_id_a=token_id_a, token_b=token_b, token_id_b=token_id_b, base_amount=base_amount
    )

    async def action(service):
        return await service.estimate_split(params)

    est = run_with_service(settings, action, index=False)
    typer.echo(f"Estimated tokens received: {est.estimated_tokens_received}")
    typer.echo(f"Vault balance A: {est.vault_balance_token_a}")
    typer.echo(f"Vault balance B: {est.vault_balance_token_b}")
    typer.echo(f"Vault has tokens: {est.vault_has_tokens}")


@app.command("activities")
def activities(
    ctx: typer.Context,
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Most recent events per stream"),
    types: list[str] = typer.Option([], "--type", "-t", help=f"Repeatable; one of {', '.join(ACTIVITY_TYPES)}"),
    with_markets: bool = typer.Option(False, "--with-markets", help="Index markets to label pair events"),
) -> None:
    """Show recent vault activity, newest first."""
    settings = ctx.obj["settings"]
    unknown = [t for t in types if t not in ACTIVITY_TYPES]
    if unknown:
        typer.echo(f"Unknown activity type: {', '.join(unknown)}", err=True)
        raise typer.Exit(2)

    async def action(service):
        return await service.get_activities(limit, types or None)

    items = run_with_service(settings, action, index=with_markets)
    for a in items:
        amount = a.base_amount if a.base_amount is not None else a.outcome_tokens_amount
        line = f"  {a.timestamp:<11} {a.type:<22} {a.transaction_hash[:18]:<18}"
        if amount is not None:
            line += f" amount={amount}"
        if a.market:
            line += f" {a.market[:50]}"
        typer.echo(line)
    typer.echo(f"Total: {len(items)} activities")


@app.command("apy")
def apy(
    ctx: typer.Context,
    limit: int = typer.Option(100, "--limit", "-n", min=2, help="Most recent deposits to use"),
) -> None:
    """Annualised share-price APY from recent deposits."""
    settings = ctx.obj["settings"]

    async def action(service):
        return await service.get_apy(limit)

    value = run_with_service(settings, action, index=False)
    typer.echo(f"APY: {value:.2f}%")
