"""Markets subcommand: list, search, show, pair, provider."""

from __future__ import annotations

import json

import typer

from pokvault.cli.runner import echo_market_line, run_with_service
from pokvault.indexing.aggregator import sort_by_recency
from pokvault.models import MarketSearchParams

app = typer.Typer(help="Supported market discovery and search")


@app.command("list")
def list_markets(
    ctx: typer.Context,
    status: str | None = typer.Option(None, "--status", "-s", help="allowed, paused or removed"),
    limit: int = typer.Option(50, "--limit", "-n", help="Max markets to show"),
) -> None:
    """List indexed markets, newest first."""
    settings = ctx.obj["settings"]

    async def action(service):
        return service.search_markets(MarketSearchParams(status=status))

    markets = sort_by_recency(run_with_service(settings, action))
    for m in markets[:limit]:
        echo_market_line(m)
    typer.echo(f"Total: {len(markets)} markets")


@app.command("search")
def search(
    ctx: typer.Context,
    url: str | None = typer.Option(None, "--url", help="Provider URL or URL fragment"),
    provider: str | None = typer.Option(None, "--provider", "-p", help="Provider id, e.g. polymarket"),
    status: str | None = typer.Option(None, "--status", "-s", help="allowed, paused or removed"),
    question: str | None = typer.Option(None, "--question", "-q", help="Question text fragment"),
) -> None:
    """Search markets; all given filters must match."""
    settings = ctx.obj["settings"]
    params = MarketSearchParams(url=url, provider=provider, status=status, question=question)

    async def action(service):
        return service.search_markets(params)

    markets = sort_by_recency(run_with_service(settings, action))
    for m in markets:
        echo_market_line(m)
    typer.echo(f"Found: {len(markets)} markets")


@app.command("show")
def show(ctx: typer.Context, market_key: str = typer.Argument(..., help="Market key")) -> None:
    """Show one market with its pairs as JSON."""
    settings = ctx.obj["settings"]

    async def action(service):
        return service.get_market(market_key)

    market = run_with_service(settings, action)
    if market is None:
        typer.echo(f"No market with key {market_key}")
        raise typer.Exit(1)
    typer.echo(json.dumps(market.model_dump(), indent=2))


@app.command("pair")
def pair(
    ctx: typer.Context,
    token_a: str = typer.Argument(..., help="Outcome token A address"),
    token_id_a: int = typer.Argument(..., min=0, help="Outcome token A id"),
    token_b: str = typer.Argument(..., help="Outcome token B address"),
    token_id_b: int = typer.Argument(..., min=0, help="Outcome token B id"),
) -> None:
    """Find the market and pair for two outcome tokens (either order)."""
    settings = ctx.obj["settings"]

    async def action(service):
        return service.find_pair(token_a, token_id_a, token_b, token_id_b)

    try:
        match = run_with_service(settings, action)
    except ValueError:
        typer.echo("Invalid token address.", err=True)
        raise typer.Exit(2)
    if match is None:
        typer.echo("Pair not supported by the vault.")
        raise typer.Exit(1)
    echo_market_line(match.market)
    typer.echo(f"  pair {match.pair.key}  status={match.pair.status}")


@app.command("provider")
def provider_market(
    ctx: typer.Context,
    provider_id: str = typer.Argument(..., help="Provider id, e.g. polymarket"),
    market_id: str = typer.Argument(..., help="Market id at the provider"),
) -> None:
    """Fetch one market straight from its provider as JSON (no indexing)."""
    settings = ctx.obj["settings"]

    async def action(service):
        return await service.get_provider_market(provider_id, market_id)

    market = run_with_service(settings, action, index=False)
    if market is None:
        typer.echo(f"No market {market_id} at provider {provider_id}")
        raise typer.Exit(1)
    typer.echo(json.dumps(market.model_dump(), indent=2))
