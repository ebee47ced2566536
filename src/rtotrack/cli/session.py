"""Shared setup and error reporting for CLI commands."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import typer
from pydantic import ValidationError
from rich.console import Console
from sqlalchemy.exc import SQLAlchemyError

from rtotrack.cli.ui import error_panel
from rtotrack.core.config import ConfigManager
from rtotrack.exceptions import ConsistencyError, RtoTrackError
from rtotrack.models import AppConfig
from rtotrack.storage import Database

logger = logging.getLogger(__name__)
console = Console()


@dataclass
class CliContext:
    """Loaded configuration plus an open database."""

    config: AppConfig
    database: Database


@contextmanager
def cli_errors() -> Iterator[None]:
    """Turn rtotrack errors into error panels and exit codes.

    Exit code 1 for caller-correctable errors, 2 for partial writes that
    need an operator.
    """
    try:
        yield
    except ConsistencyError as e:
        logger.error("Consistency error: %s (%s)", e.message, e.details)
        console.print()
        console.print(error_panel(e.message, e.details))
        raise typer.Exit(2)
    except RtoTrackError as e:
        console.print()
        console.print(error_panel(e.message, e.details))
        raise typer.Exit(1)
    except ValidationError as e:
        console.print()
        lines = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        ]
        console.print(error_panel("Invalid input.", "\n".join(lines)))
        raise typer.Exit(1)
    except SQLAlchemyError as e:
        logger.exception("Storage error")
        console.print()
        console.print(error_panel("Storage error.", str(e.__cause__ or e)))
        raise typer.Exit(1)


@contextmanager
def open_context() -> Iterator[CliContext]:
    """Load config and open the database for one command."""
    with cli_errors():
        manager = ConfigManager()
        config = manager.load()
        database = Database(manager.database_url(config))
        database.create_all()
    try:
        yield CliContext(config=config, database=database)
    finally:
        database.dispose()
