"""Configuration management CLI commands."""

from pathlib import Path

import typer
from rich.syntax import Syntax

from ..config import CONFIG_FILE, ClientConfig
from ..errors import ConfigError
from .common_options import config_option
from .display import console, error, info, success, warning

app = typer.Typer(help="Manage rtdb configuration")


@app.command()
def init(
    database_url: str = typer.Option(..., "--url", help="Database URL"),
    access_token: str | None = typer.Option(None, "--token", help="OAuth2 access token"),
    timeout: float = typer.Option(30.0, "--timeout", min=0.1, help="Request timeout (seconds)"),
    output: Path = typer.Option(CONFIG_FILE, "--output", "-o", help="Where to write the file"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
):
    """Write a configuration file.

    Example:
        rtdb config init --url https://my-db.firebaseio.com
    """
    try:
        config = ClientConfig(database_url=database_url, access_token=access_token, timeout=timeout)
    except ValueError as e:
        error(f"Invalid configuration: {e}")
        raise typer.Exit(1)

    if output.exists() and not force:
        warning(f"{output} already exists (use --force to overwrite)")
        raise typer.Exit(1)

    config.save(output)
    success(f"Configuration saved to {output}")


@app.command()
def show(config: Path | None = config_option()):
    """Display the configuration the client would use."""
    try:
        loaded = ClientConfig.load(config)
    except ConfigError as e:
        error(str(e))
        info("Run 'rtdb config init --url ...' or set RTDB_DATABASE_URL")
        raise typer.Exit(1)

    data = loaded.model_copy(
        update={"access_token": "****" if loaded.access_token else None}
    )
    console.print(Syntax(data.to_yaml_string(), "yaml"))
