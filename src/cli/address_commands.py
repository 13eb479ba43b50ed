"""Address book CLI commands."""

import typer
from rich.table import Table

from src.addressbook.core.errors import ClientInputError
from src.addressbook.core.pagination import ListingRequest, SortField
from src.addressbook.entities.service.address import AddressCreate, AddressRepository
from src.addressbook.runtime.context import get_config

from .utils import cli_session, console

address_app = typer.Typer(help="📇 Browse and edit address book entries")


@address_app.command("list")
def list_addresses(
    search: str | None = typer.Option(None, "--search", "-s", help="First or last name prefix"),
    sort: SortField = typer.Option(SortField.NONE, "--sort", help="Order of the listing"),
    limit: int | None = typer.Option(None, "--limit", "-l", help="Page size"),
    last: str | None = typer.Option(None, "--last", help="Continuation token of the previous page"),
) -> None:
    """Print one page of addresses and the token for the next one."""
    pagination = get_config().pagination
    try:
        with cli_session() as session:
            page = AddressRepository(session).list_page(
                ListingRequest(search=search, sort=sort, last=last, limit=limit),
                default_limit=pagination.default_limit,
                max_limit=pagination.max_limit,
            )
    except ClientInputError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(code=2) from e

    if not page.items:
        console.print("[yellow]No addresses found[/yellow]")
        return

    table = Table(title="Addresses")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("First Name", style="green")
    table.add_column("Last Name", style="green")
    table.add_column("Phone", style="blue")
    for address in page.items:
        table.add_row(str(address.id), address.first_name, address.last_name, address.phone or "")

    console.print(table)
    console.print(f"[dim]next: {page.next_token}[/dim]")


@address_app.command("add")
def add_address(
    first_name: str = typer.Argument(..., help="First name"),
    last_name: str = typer.Argument(..., help="Last name"),
    phone: str | None = typer.Option(None, "--phone", "-p", help="Phone number"),
) -> None:
    """Add a new address."""
    if not first_name or not last_name:
        console.print("[red]❌ first and last name are required[/red]")
        raise typer.Exit(code=2)

    with cli_session() as session:
        created = AddressRepository(session).create(
            AddressCreate(first_name=first_name, last_name=last_name, phone=phone)
        )
    console.print(f"[green]✅ Created address {created.id}[/green]")


@address_app.command("delete")
def delete_address(
    address_id: int = typer.Argument(..., help="ID of the address to delete"),
) -> None:
    """Delete an address."""
    with cli_session() as session:
        deleted = AddressRepository(session).delete(address_id)

    if not deleted:
        console.print(f"[red]❌ no entry with id {address_id}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✅ Deleted address {address_id}[/green]")


@address_app.command("show")
def show_address(
    address_id: int = typer.Argument(..., help="ID of the address to show"),
) -> None:
    """Show a single address."""
    with cli_session() as session:
        address = AddressRepository(session).require(address_id)

    console.print(f"[cyan]{address.id}[/cyan] {address.first_name} {address.last_name}")
    if address.phone:
        console.print(f"📞 {address.phone}")
