"""Typer CLI root application with serve command."""

import typer

from voter_registry.core.config import get_settings
from voter_registry.core.logging import setup_logging

app = typer.Typer(name="voter-registry", help="Voter registry API and maintenance CLI")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),  # noqa: S104
    port: int | None = typer.Option(None, "--port", help="Bind port (defaults to PORT setting)"),
) -> None:
    """Start the API server."""
    import uvicorn

    uvicorn.run(
        "voter_registry.main:create_app",
        factory=True,
        host=host,
        port=port or get_settings().port,
        reload=reload,
    )


def _register_subcommands() -> None:
    """Register all CLI subcommands."""
    from voter_registry.cli.db_cmd import db_app
    from voter_registry.cli.maintenance_cmd import fix_register_numbers, import_classification, remove_duplicates

    app.add_typer(db_app, name="db", help="Database migration commands")
    app.command("import-classification")(import_classification)
    app.command("remove-duplicates")(remove_duplicates)
    app.command("fix-register-numbers")(fix_register_numbers)


_register_subcommands()
