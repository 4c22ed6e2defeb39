"""CLI commands for reading stored county results."""

import asyncio
from typing import Annotated

import typer

results_app = typer.Typer()


@results_app.command("show")
def show(
    county: Annotated[str, typer.Argument(help="County name or identifier")],
    result_type: Annotated[
        str | None,
        typer.Option("--type", help="Filter: candidate or measure"),
    ] = None,
    grouped: Annotated[bool, typer.Option("--grouped", help="Show races and measure groups")] = False,
) -> None:
    """Print a county's stored results."""
    if result_type is not None and result_type not in ("candidate", "measure"):
        typer.echo(f"Invalid result type: {result_type}", err=True)
        raise typer.Exit(code=1)
    asyncio.run(_show_impl(county, result_type, grouped))


async def _show_impl(county: str, result_type: str | None, grouped: bool) -> None:
    from county_results_api.cli.runtime import cli_runtime
    from county_results_api.lib.results_store import CollectionNotFoundError, ResultType
    from county_results_api.services import results_service

    async with cli_runtime() as runtime:
        try:
            if grouped:
                races = []
                groups = []
                if result_type != "measure":
                    races = await results_service.get_candidate_races(runtime.store, county)
                if result_type != "candidate":
                    groups = await results_service.get_measure_groups(runtime.store, county)
            else:
                response = await results_service.get_county_results(
                    runtime.store,
                    county,
                    ResultType(result_type) if result_type else None,
                )
        except CollectionNotFoundError as e:
            typer.echo(f"No results stored for {county}.", err=True)
            raise typer.Exit(code=1) from e

    if not grouped:
        typer.echo(f"{response.total} results")
        for record in response.results:
            bond = " (bond)" if record.is_bond else ""
            typer.echo(
                f"[{record.type}] {record.contest_name} | {record.choice_name}: "
                f"{record.votes} votes, {record.percentage}%{bond}"
            )
        return

    for race in races:
        typer.echo(race.title)
        for candidate in race.candidates:
            typer.echo(
                f"  {candidate.position}. {candidate.name}: {candidate.votes_display} ({candidate.percentage_display})"
            )
    for group in groups:
        typer.echo(group.title)
        for measure in group.measures:
            typer.echo(f"  {measure.name}: yes={measure.yes_votes_display} no={measure.no_votes_display}")
