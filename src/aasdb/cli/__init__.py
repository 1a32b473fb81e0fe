"""CLI commands for aasdb.

Provides command-line interface using Typer:
- aasdb load: Flatten AASX packages into the database
- aasdb init-db: Create the record tables

Usage:
    aasdb --help
    aasdb load package.aasx other.aasx
    aasdb load package.aasx --dry-run
    aasdb load package.aasx --files --data-path ./data
    aasdb init-db
"""

import typer

from aasdb.cli.db_cmd import app as db_app
from aasdb.cli.load_cmd import load

app = typer.Typer(
    name="aasdb",
    help="aasdb: Flatten Asset Administration Shell packages into relational records",
    no_args_is_help=True,
)

# Options may follow the package paths, so load is a command, not a group
app.command(name="load", help="Load AASX packages into the database")(load)
app.add_typer(db_app, name="init-db")


@app.callback()
def callback() -> None:
    """aasdb: Flatten Asset Administration Shell packages into relational records."""
    pass


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
