"""Run one async action against a freshly built MarketIndexService."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import typer

from pokvault.config import Settings
from pokvault.errors import PokVaultError
from pokvault.models import Market
from pokvault.service import MarketIndexService, build_service


def run_with_service(
    settings: Settings,
    action: Callable[[MarketIndexService], Awaitable[Any]],
    index: bool = True,
) -> Any:
    """Build the service, optionally index markets, run action, close. Errors exit with code 1."""

    async def main() -> Any:
        service = build_service(settings)
        try:
            if index:
                await service.initialize()
            return await action(service)
        finally:
            await service.close()

    try:
        return asyncio.run(main())
    except PokVaultError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def echo_market_line(m: Market) -> None:
    providers = ",".join(m.providers)
    typer.echo(f"  {m.overall_status:<8} {m.market_key[:40]:<40} [{providers}] {m.question[:60]}")
