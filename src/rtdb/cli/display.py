"""Consolidated display utilities for CLI commands."""

import json
from typing import Any

from rich.console import Console
from rich.syntax import Syntax

console = Console()
err_console = Console(stderr=True)


def success(message: str) -> None:
    """Print success message."""
    console.print(f"[green]✓ {message}[/green]")


def warning(message: str) -> None:
    """Print warning message."""
    err_console.print(f"[yellow]⚠️  {message}[/yellow]")


def error(message: str) -> None:
    """Print error message."""
    err_console.print(f"[red]❌ {message}[/red]")


def info(message: str) -> None:
    """Print info message."""
    console.print(message)


def info_dict(data: dict[str, Any], indent: str = "  ") -> None:
    """Print a dictionary as indented key-value pairs."""
    for key, value in data.items():
        console.print(f"{indent}{key}: {value}")


def json_value(value: Any) -> None:
    """Pretty-print a JSON value."""
    console.print(Syntax(json.dumps(value, indent=2, sort_keys=True), "json"))
