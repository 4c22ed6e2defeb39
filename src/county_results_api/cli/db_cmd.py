"""Database CLI commands: create the fixed schema and drop results collections."""

import asyncio

import typer
from loguru import logger

db_app = typer.Typer()


@db_app.command()
def init() -> None:
    """Create the county links table if it does not exist."""
    asyncio.run(_init_impl())


async def _init_impl() -> None:
    from county_results_api.cli.runtime import cli_runtime

    async with cli_runtime() as runtime:
        logger.info(f"Database schema ready at {runtime.settings.database_url}")
    typer.echo("Database initialized.")


@db_app.command()
def cleanup(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Drop every per-county results collection (county links are kept)."""
    if not yes:
        typer.confirm("Drop all county results collections?", abort=True)
    asyncio.run(_cleanup_impl())


async def _cleanup_impl() -> None:
    from county_results_api.cli.runtime import cli_runtime
    from county_results_api.lib.results_store import cleanup_collections

    async with cli_runtime() as runtime:
        outcome = await cleanup_collections(runtime.store)

    typer.echo(f"Deleted {len(outcome['deleted'])} collections, skipped {len(outcome['skipped'])}")
    for name in outcome["deleted"]:
        typer.echo(f"  - {name}")
