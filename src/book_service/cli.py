"""Command-line interface for running and preparing the book service."""

import typer
from rich.console import Console
from rich.panel import Panel

from book_service.core.services import DbManageService, DbSessionService
from book_service.runtime.context import get_config

console = Console()

app = typer.Typer(
    name="book-service",
    help="📚 Book Service CLI - run the API and manage its database",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.command(name="init-db")
def init_db() -> None:
    """
    🗄️ Create the database schema.

    Creates the books table (and its soft-delete index) in the database named
    by the active configuration. Existing tables are left untouched.
    """
    config = get_config()
    database_service = DbSessionService()
    try:
        DbManageService(database_service.engine).create_all()
    except Exception as e:
        console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
        raise typer.Exit(1) from e
    finally:
        database_service.dispose()

    kind = "sqlite" if config.database.is_sqlite else "postgresql"
    console.print(f"[green]✅ Database schema ready ({kind})[/green]")


@app.command(name="serve")
def serve(
    host: str | None = typer.Option(None, help="Host to bind (defaults to config app.host)"),
    port: int | None = typer.Option(None, help="Port to bind (defaults to config app.port)"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
) -> None:
    """
    🚀 Start the HTTP server.
    """
    import uvicorn

    config = get_config()
    bind_host = host or config.app.host
    bind_port = port or config.app.port

    console.print(
        Panel.fit(
            f"[bold green]Starting {config.app.name}[/bold green]\n"
            f"[blue]Listening on[/blue] http://{bind_host}:{bind_port}",
            border_style="green",
        )
    )
    uvicorn.run(
        "book_service.api.http.app:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=config.logging.level.lower(),
    )


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
