"""Console output shared by the CLI command modules."""

import sys
from typing import NoReturn

from rich.console import Console

console = Console()
err_console = Console(stderr=True)


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    err_console.print(f"[red]✗[/red] {message}")
    sys.exit(1)
