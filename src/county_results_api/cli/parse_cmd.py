"""CLI commands for ingesting county results."""

import asyncio
import uuid
from typing import Annotated

import typer
from pydantic import ValidationError

from county_results_api.lib.results_parser import ParseSummary
from county_results_api.schemas.county_link import CountyLinkCreateRequest

parse_app = typer.Typer()

# Conventional exit status for a process stopped by SIGINT.
CANCELLED_EXIT_CODE = 130


def _cancelled() -> typer.Exit:
    typer.echo("Parse cancelled, rows already saved are kept.", err=True)
    return typer.Exit(code=CANCELLED_EXIT_CODE)


def _echo_summary(summary: ParseSummary) -> None:
    typer.echo(
        f"{summary.county_id}: {summary.files_processed} files, "
        f"{summary.rows_saved} rows saved, {summary.rows_failed} rows failed"
    )


@parse_app.command("county")
def parse_county(
    link_id: Annotated[str, typer.Argument(help="County link UUID")],
) -> None:
    """Parse the latest results for one stored county link."""
    try:
        parsed_id = uuid.UUID(link_id)
    except ValueError as e:
        typer.echo(f"Invalid UUID: {link_id}", err=True)
        raise typer.Exit(code=1) from e
    asyncio.run(_parse_county_impl(parsed_id))


async def _parse_county_impl(link_id: uuid.UUID) -> None:
    from county_results_api.cli.runtime import cancel_on_interrupt, cli_runtime
    from county_results_api.lib.results_parser import ParseCancelledError, ParseError
    from county_results_api.services import county_link_service, parse_service

    async with cli_runtime() as runtime:
        async with runtime.session_factory() as session:
            link = await county_link_service.get_link(session, link_id)
        if link is None:
            typer.echo(f"County link {link_id} not found.", err=True)
            raise typer.Exit(code=1)
        try:
            with cancel_on_interrupt() as cancel_event:
                summary = await parse_service.parse_county_link(runtime.registry, link, cancel_event=cancel_event)
        except ParseCancelledError as e:
            raise _cancelled() from e
        except ParseError as e:
            typer.echo(f"Parse failed: {e}", err=True)
            raise typer.Exit(code=1) from e
    _echo_summary(summary)


@parse_app.command("method")
def parse_method(
    method: Annotated[str, typer.Argument(help="Parse method: zip or html")],
) -> None:
    """Parse every stored county link configured for a method."""
    asyncio.run(_parse_method_impl(method))


async def _parse_method_impl(method: str) -> None:
    from county_results_api.cli.runtime import cancel_on_interrupt, cli_runtime
    from county_results_api.lib.results_parser import ParseCancelledError, validate_parse_method
    from county_results_api.services import county_link_service, parse_service

    try:
        method = str(validate_parse_method(method))
    except ValueError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from e

    async with cli_runtime() as runtime:
        async with runtime.session_factory() as session:
            links = await county_link_service.list_links(session)
        try:
            with cancel_on_interrupt() as cancel_event:
                summary = await parse_service.parse_all_by_method(
                    runtime.registry, links, method, cancel_event=cancel_event
                )
        except ParseCancelledError as e:
            raise _cancelled() from e

    typer.echo(
        f"Processed {summary.processed}/{summary.total_counties} counties: "
        f"{summary.successful} successful, {len(summary.failed)} failed"
    )
    for failure in summary.failed:
        typer.echo(f"  {failure}", err=True)
    if summary.failed:
        raise typer.Exit(code=1)


@parse_app.command("url")
def parse_url(
    county_name: Annotated[str, typer.Option("--county", help="County name")],
    link: Annotated[str, typer.Option("--url", help="Results source URL")],
    method: Annotated[str, typer.Option("--method", help="Parse method: zip or html")] = "zip",
) -> None:
    """Parse an ad-hoc source without storing a county link."""
    try:
        request = CountyLinkCreateRequest(county_name=county_name, link=link, parse_method=method)
    except ValidationError as e:
        typer.echo(f"Invalid parse request: {e}", err=True)
        raise typer.Exit(code=1) from e
    asyncio.run(_parse_url_impl(request))


async def _parse_url_impl(request: CountyLinkCreateRequest) -> None:
    from county_results_api.cli.runtime import cancel_on_interrupt, cli_runtime
    from county_results_api.lib.results_parser import ParseCancelledError, ParseError
    from county_results_api.services import parse_service

    async with cli_runtime() as runtime:
        try:
            with cancel_on_interrupt() as cancel_event:
                summary = await parse_service.direct_parse(runtime.registry, request, cancel_event=cancel_event)
        except ParseCancelledError as e:
            raise _cancelled() from e
        except ParseError as e:
            typer.echo(f"Parse failed: {e}", err=True)
            raise typer.Exit(code=1) from e
    _echo_summary(summary)
