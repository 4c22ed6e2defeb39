"""CLI commands for managing county data source links."""

import asyncio
import json
import uuid
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from county_results_api.schemas.county_link import BulkCountyLinkRequest, CountyLinkCreateRequest

links_app = typer.Typer()


@links_app.command("add")
def add(
    county_name: Annotated[str, typer.Option("--county", help="County name")],
    link: Annotated[str, typer.Option("--url", help="Results source URL")],
    parse_method: Annotated[str, typer.Option("--method", help="Parse method: zip or html")] = "zip",
) -> None:
    """Register a county data source."""
    try:
        request = CountyLinkCreateRequest(county_name=county_name, link=link, parse_method=parse_method)
    except ValidationError as e:
        typer.echo(f"Invalid county link: {e}", err=True)
        raise typer.Exit(code=1) from e
    asyncio.run(_add_impl(request))


async def _add_impl(request: CountyLinkCreateRequest) -> None:
    from county_results_api.cli.runtime import cli_runtime
    from county_results_api.services import county_link_service

    async with cli_runtime() as runtime, runtime.session_factory() as session:
        created = await county_link_service.create_link(session, request)
        typer.echo(f"Created county link {created.id} ({created.county_name}, {created.parse_method})")


@links_app.command("list")
def list_links(
    parse_method: Annotated[str | None, typer.Option("--method", help="Only show links for this method")] = None,
) -> None:
    """List stored county links."""
    asyncio.run(_list_impl(parse_method))


async def _list_impl(parse_method: str | None) -> None:
    from county_results_api.cli.runtime import cli_runtime
    from county_results_api.services import county_link_service

    async with cli_runtime() as runtime, runtime.session_factory() as session:
        links = await county_link_service.list_links(session, parse_method=parse_method)

    if not links:
        typer.echo("No county links found.")
        return
    for link in links:
        typer.echo(f"{link.id}  {link.county_name:<20}  {link.parse_method:<5}  {link.link}")


@links_app.command("remove")
def remove(
    link_id: Annotated[str, typer.Argument(help="County link UUID")],
) -> None:
    """Delete a county link."""
    try:
        parsed_id = uuid.UUID(link_id)
    except ValueError as e:
        typer.echo(f"Invalid UUID: {link_id}", err=True)
        raise typer.Exit(code=1) from e
    asyncio.run(_remove_impl(parsed_id))


async def _remove_impl(link_id: uuid.UUID) -> None:
    from county_results_api.cli.runtime import cli_runtime
    from county_results_api.services import county_link_service

    async with cli_runtime() as runtime, runtime.session_factory() as session:
        deleted = await county_link_service.delete_link(session, link_id)

    if not deleted:
        typer.echo(f"County link {link_id} not found.", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Deleted county link {link_id}")


@links_app.command("import")
def import_links(
    file_path: Annotated[Path, typer.Argument(help="JSON file: a list of {county_name, link, parse_method}")],
) -> None:
    """Bulk save county links from a JSON file.

    Every link is validated before any is saved.
    """
    if not file_path.exists():
        typer.echo(f"File not found: {file_path}", err=True)
        raise typer.Exit(code=1)

    try:
        payload = json.loads(file_path.read_text(encoding="utf-8"))
        if isinstance(payload, list):
            payload = {"links": payload}
        request = BulkCountyLinkRequest.model_validate(payload)
    except (json.JSONDecodeError, ValidationError) as e:
        typer.echo(f"Invalid links file: {e}", err=True)
        raise typer.Exit(code=1) from e

    asyncio.run(_import_impl(request))


async def _import_impl(request: BulkCountyLinkRequest) -> None:
    from county_results_api.cli.runtime import cli_runtime
    from county_results_api.services import county_link_service

    async with cli_runtime() as runtime, runtime.session_factory() as session:
        response = await county_link_service.bulk_create_links(session, request.links)

    typer.echo(f"Saved {response.saved_count}/{response.total_submitted} county links")
    for error in response.errors:
        typer.echo(f"  {error}", err=True)
