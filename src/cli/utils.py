"""Shared utilities for CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.console import Console
from sqlmodel import Session

from src.addressbook.core.errors import NotFoundError, StoreError
from src.addressbook.core.services import DbSessionService

# Initialize Rich console for colored output
console = Console()


@contextmanager
def cli_session() -> Iterator[Session]:
    """Open a committed session on the configured database.

    Lookup and store failures are printed and turned into exit code 1.
    """
    service = DbSessionService()
    try:
        with service.session_scope() as session:
            yield session
    except (NotFoundError, StoreError) as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        service.dispose()
