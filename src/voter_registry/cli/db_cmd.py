"""Schema migration commands for the voters table, driven through Alembic."""

import typer
from loguru import logger

db_app = typer.Typer()

ALEMBIC_INI = "alembic.ini"


def _alembic_config(ini_path: str):  # type: ignore[no-untyped-def]
    from alembic.config import Config

    return Config(ini_path)


@db_app.command()
def upgrade(
    revision: str = typer.Argument("head", help="Target revision"),
    sql: bool = typer.Option(False, "--sql", help="Print the migration SQL instead of applying it"),
    config: str = typer.Option(ALEMBIC_INI, "--config", "-c", help="Path to alembic.ini"),
) -> None:
    """Create or migrate the voters table up to the target revision."""
    from alembic import command

    if not sql:
        logger.info(f"Upgrading database to {revision}")
    command.upgrade(_alembic_config(config), revision, sql=sql)
    if not sql:
        logger.info("Database upgrade complete")


@db_app.command()
def downgrade(
    revision: str = typer.Argument("-1", help="Target revision"),
    config: str = typer.Option(ALEMBIC_INI, "--config", "-c", help="Path to alembic.ini"),
) -> None:
    """Roll the voters schema back to the target revision."""
    from alembic import command

    logger.info(f"Downgrading database to {revision}")
    command.downgrade(_alembic_config(config), revision)
    logger.info("Database downgrade complete")


@db_app.command()
def current(
    config: str = typer.Option(ALEMBIC_INI, "--config", "-c", help="Path to alembic.ini"),
) -> None:
    """Show the revision the database is at."""
    from alembic import command

    command.current(_alembic_config(config), verbose=True)


@db_app.command()
def history(
    config: str = typer.Option(ALEMBIC_INI, "--config", "-c", help="Path to alembic.ini"),
) -> None:
    """List known migration revisions."""
    from alembic import command

    command.history(_alembic_config(config))
