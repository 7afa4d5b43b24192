"""Common Typer options shared across CLI commands."""

import json

import typer


def config_option(help_text: str = "Configuration file (YAML)") -> typer.Option:
    """Create a standard configuration file option.

    Args:
        help_text: Custom help text

    Returns:
        Configured Typer Option
    """
    return typer.Option(
        None,
        "--config",
        "-c",
        help=help_text,
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    )


def timeout_option(help_text: str = "Deadline for the whole command in seconds") -> typer.Option:
    """Create a standard deadline option."""
    return typer.Option(None, "--timeout", "-t", min=0.0, help=help_text)


def yes_option(help_text: str = "Skip confirmation prompt") -> typer.Option:
    """Create a standard yes/skip confirmation option."""
    return typer.Option(False, "--yes", "-y", help=help_text)


def load_json_argument(text: str) -> object:
    """Parse a JSON command line argument or exit with a usage error."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"not valid JSON: {e}")

