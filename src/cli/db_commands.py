"""Database management CLI commands."""

from pathlib import Path

import typer

from src.addressbook.core.services import read_seed_file
from src.addressbook.entities.service.address import AddressRepository
from src.addressbook.runtime.init_db import init_db

from .utils import cli_session, console

db_app = typer.Typer(help="🗄️ Database management commands")


@db_app.command("init")
def init_command(
    seed: bool = typer.Option(True, "--seed/--no-seed", help="Seed an empty table"),
    seed_file: Path | None = typer.Option(
        None, "--seed-file", "-f", help="CSV file to seed from (default: database.seed_file)"
    ),
) -> None:
    """Create the address table and seed it when it is empty."""
    inserted = init_db(seed=seed, seed_file=seed_file)
    console.print("[green]✅ Database initialized[/green]")
    if inserted:
        console.print(f"[green]Seeded {inserted} addresses[/green]")


@db_app.command("seed")
def seed_command(
    csv_path: Path = typer.Argument(..., help="Headerless first_name,last_name,phone CSV"),
) -> None:
    """Append every row of a CSV file to the address table."""
    if not csv_path.is_file():
        console.print(f"[red]❌ {csv_path} not found[/red]")
        raise typer.Exit(code=1)

    try:
        entries = list(read_seed_file(csv_path))
    except ValueError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(code=1) from e

    init_db(seed=False)
    with cli_session() as session:
        inserted = AddressRepository(session).add_all(entries)
    console.print(f"[green]✅ Added {inserted} addresses from {csv_path}[/green]")
