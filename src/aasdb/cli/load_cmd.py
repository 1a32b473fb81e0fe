"""CLI command for loading AASX packages.

Usage:
    aasdb load package.aasx
    aasdb load packages/*.aasx --files
    aasdb load package.aasx --dry-run
    aasdb load package.aasx --files-only --data-path /var/lib/aasdb
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer


def load(
    paths: list[Path] = typer.Argument(
        ...,
        help="AASX or JSON environment files to load",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Flatten without writing to the database",
    ),
    with_files: bool = typer.Option(
        False,
        "--files",
        "-f",
        help="Export thumbnails and supplementary files",
    ),
    files_only: bool = typer.Option(
        False,
        "--files-only",
        help="Only export thumbnails and supplementary files",
    ),
    data_path: Path | None = typer.Option(
        None,
        "--data-path",
        "-d",
        help="Data directory (exported files go to <data-path>/files)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show verbose output",
    ),
) -> None:
    """Load one or more packages.

    Packages are loaded one after the other and share one concept
    description cache, so concept descriptions are stored once. Options
    may follow the package paths.
    """
    asyncio.run(_load(paths, dry_run, with_files, files_only, data_path, verbose))


async def _load(
    paths: list[Path],
    dry_run: bool,
    with_files: bool,
    files_only: bool,
    data_path: Path | None,
    verbose: bool,
) -> None:
    """Async implementation of the load command."""
    from rich.console import Console
    from rich.table import Table
    from sqlalchemy.engine import make_url
    from sqlalchemy.exc import SQLAlchemyError

    from aasdb.config import settings
    from aasdb.loader import AuxiliaryStatus, load_packages
    from aasdb.observability import configure_logging
    from aasdb.persistence import DatabaseSink, MemorySink, close_db, session_context
    from aasdb.persistence.db import health_check

    console = Console()
    configure_logging(
        json_format=settings.log_json,
        level="DEBUG" if verbose else settings.log_level,
    )

    files_dir = Path(data_path or settings.data_path) / "files"
    with_db_files = with_files or files_only

    try:
        if dry_run or files_only:
            results = await load_packages(
                list(paths),
                sink=MemorySink(),
                create_files_only=files_only,
                with_db_files=with_db_files,
                files_dir=files_dir,
            )
        else:
            if not await health_check():
                database = make_url(settings.database_url).render_as_string(hide_password=True)
                console.print(f"[red]Database not reachable:[/red] {database}")
                raise typer.Exit(code=1)
            async with session_context() as session:
                results = await load_packages(
                    list(paths),
                    sink=DatabaseSink(session),
                    with_db_files=with_db_files,
                    files_dir=files_dir,
                )
    except (OSError, ValueError, SQLAlchemyError) as e:
        console.print(f"[red]Error loading package:[/red] {e}")
        raise typer.Exit(code=1) from e
    finally:
        await close_db()

    table = Table(title="Loaded Packages")
    table.add_column("Package", style="cyan")
    table.add_column("Shells", style="green")
    table.add_column("Submodels", style="green")
    table.add_column("Elements", style="magenta")
    table.add_column("Values", style="magenta")
    table.add_column("CDs", style="yellow")
    table.add_column("Fallbacks", style="red")
    table.add_column("Files", style="blue")

    for result in results:
        counts = result.counts
        values = sum(counts.get(name, 0) for name in ("s_value", "i_value", "d_value", "o_value"))
        exported = sum(
            1 for aux in result.auxiliary if aux.status is AuxiliaryStatus.SUCCEEDED
        )
        table.add_row(
            result.path.name,
            str(counts.get("aas", 0)),
            str(counts.get("sm", 0)),
            str(counts.get("sme", 0)),
            str(values),
            str(counts.get("cd", 0)),
            str(result.type_fallbacks),
            f"{exported}/{len(result.auxiliary)}" if result.auxiliary else "-",
        )

    console.print(table)
    if dry_run:
        console.print("[yellow]Dry run mode - no changes made[/yellow]")
