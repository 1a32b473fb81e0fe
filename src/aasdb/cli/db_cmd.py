"""CLI command for preparing the database.

Usage:
    aasdb init-db
"""

from __future__ import annotations

import asyncio

import typer

app = typer.Typer(help="Create the record tables")


@app.callback(invoke_without_command=True)
def init_db() -> None:
    """Create every record table that does not exist yet."""
    asyncio.run(_init_db())


async def _init_db() -> None:
    from rich.console import Console
    from sqlalchemy.engine import make_url

    from aasdb.config import settings
    from aasdb.persistence import close_db, init_db

    console = Console()
    try:
        await init_db()
    except OSError as e:
        console.print(f"[red]Cannot connect to database:[/red] {e}")
        raise typer.Exit(code=1) from e
    finally:
        await close_db()
    database = make_url(settings.database_url).render_as_string(hide_password=True)
    console.print(f"[green]Tables created in[/green] {database}")
