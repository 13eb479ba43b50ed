"""Server CLI commands."""

import typer
import uvicorn

from src.addressbook.runtime.context import get_config

from .utils import console


def serve(
    host: str | None = typer.Option(None, help="Host to bind to (default: app.host)"),
    port: int | None = typer.Option(None, help="Port to bind to (default: app.port)"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
) -> None:
    """
    🚀 Start the address book API server.
    """
    config = get_config()
    host = host or config.app.host
    port = port or config.app.port

    console.print(f"[blue]Server will be available at:[/blue] http://{host}:{port}")
    console.print("[dim]Press Ctrl+C to stop the server[/dim]")
    uvicorn.run(
        "src.addressbook.api.http.app:app",
        host=host,
        port=port,
        reload=reload,
        access_log=False,  # request logging happens in middleware
    )
