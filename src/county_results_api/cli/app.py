"""Typer CLI root application with serve command."""

import typer

from county_results_api.core.config import get_settings
from county_results_api.core.logging import setup_logging

app = typer.Typer(name="county-results", help="County election results ingestion CLI")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),  # noqa: S104
    port: int = typer.Option(8000, "--port", help="Bind port"),
) -> None:
    """Start the API server."""
    import uvicorn

    uvicorn.run(
        "county_results_api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


def _register_subcommands() -> None:
    """Register all CLI subcommand groups."""
    from county_results_api.cli.db_cmd import db_app
    from county_results_api.cli.links_cmd import links_app
    from county_results_api.cli.parse_cmd import parse_app
    from county_results_api.cli.results_cmd import results_app

    app.add_typer(db_app, name="db", help="Database schema and cleanup commands")
    app.add_typer(links_app, name="links", help="County link management commands")
    app.add_typer(parse_app, name="parse", help="Results ingestion commands")
    app.add_typer(results_app, name="results", help="Stored results commands")


_register_subcommands()
