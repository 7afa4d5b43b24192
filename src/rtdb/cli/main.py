"""rtdb CLI entry point."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer

from ..client import Client
from ..config import ClientConfig
from ..context import CallContext
from ..errors import RTDBError, TransactionExhaustedError
from . import config as config_cli
from .common_options import config_option, load_json_argument, timeout_option, yes_option
from .display import error, info, info_dict, json_value, success, warning

app = typer.Typer(
    name="rtdb",
    help="Read and write a hierarchical JSON database over HTTP",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.add_typer(config_cli.app, name="config", help="⚙️ Manage client configuration")


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP traffic"),
):
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )


def open_client(config_path: Path | None) -> Client:
    """Build a client from the resolved configuration."""
    return Client(ClientConfig.load(config_path))


def make_context(timeout: float | None) -> CallContext:
    if timeout is None:
        return CallContext.background()
    return CallContext.with_timeout(timeout)


@contextmanager
def reporting_errors() -> Iterator[None]:
    """Turn library errors into a red message and exit status 1."""
    try:
        yield
    except TransactionExhaustedError as e:
        warning(str(e))
        info("The node is under heavy contention; try again later")
        raise typer.Exit(1)
    except RTDBError as e:
        error(f"Error: {e}")
        raise typer.Exit(1)


@app.command()
def get(
    path: str = typer.Argument("/", help="Node path"),
    etag: bool = typer.Option(False, "--etag", help="Also print the node's ETag"),
    config: Path | None = config_option(),
    timeout: float | None = timeout_option(),
):
    """Print the value stored at PATH.

    Example:
        rtdb get /users/alice
        rtdb get /counters/visits --etag
    """
    with reporting_errors(), open_client(config) as client:
        ref = client.reference(path)
        ctx = make_context(timeout)
        if etag:
            value, tag = ref.get_with_etag(ctx)
            info_dict({"ETag": tag})
        else:
            value = ref.get(ctx)
        json_value(value)


@app.command(name="set")
def set_value(
    path: str = typer.Argument(..., help="Node path"),
    value: str = typer.Argument(..., help="JSON value"),
    config: Path | None = config_option(),
    timeout: float | None = timeout_option(),
):
    """Overwrite the value at PATH.

    Example:
        rtdb set /users/alice '{"age": 30}'
    """
    data = load_json_argument(value)
    with reporting_errors(), open_client(config) as client:
        client.reference(path).set(data, make_context(timeout))
    success(f"Set {path}")


@app.command()
def update(
    path: str = typer.Argument(..., help="Node path"),
    values: str = typer.Argument(..., help="JSON object of child key to value"),
    config: Path | None = config_option(),
    timeout: float | None = timeout_option(),
):
    """Merge a JSON object into the node at PATH.

    Example:
        rtdb update /users/alice '{"age": 31, "city": "Oslo"}'
    """
    data = load_json_argument(values)
    if not isinstance(data, dict):
        raise typer.BadParameter("update expects a JSON object")
    with reporting_errors(), open_client(config) as client:
        client.reference(path).update(data, make_context(timeout))
    success(f"Updated {len(data)} key(s) under {path}")


@app.command()
def push(
    path: str = typer.Argument(..., help="Parent node path"),
    value: str | None = typer.Argument(None, help="JSON value for the new child"),
    config: Path | None = config_option(),
    timeout: float | None = timeout_option(),
):
    """Add a child with a generated key under PATH and print its path."""
    data = load_json_argument(value) if value is not None else None
    with reporting_errors(), open_client(config) as client:
        child = client.reference(path).push(data, make_context(timeout))
    success(f"Created {child}")


@app.command()
def delete(
    path: str = typer.Argument(..., help="Node path"),
    yes: bool = yes_option(),
    config: Path | None = config_option(),
    timeout: float | None = timeout_option(),
):
    """Delete the node at PATH and everything below it."""
    if not yes and not typer.confirm(f"Delete {path} and all of its children?", default=False):
        warning("Nothing deleted")
        raise typer.Exit(0)
    with reporting_errors(), open_client(config) as client:
        client.reference(path).delete(make_context(timeout))
    success(f"Deleted {path}")


@app.command()
def incr(
    path: str = typer.Argument(..., help="Node path holding a number"),
    by: int = typer.Option(1, "--by", help="Increment"),
    config: Path | None = config_option(),
    timeout: float | None = timeout_option(),
):
    """Atomically add to the number at PATH (missing nodes count as 0).

    Example:
        rtdb incr /counters/visits --by 5
    """

    def add(current):
        if current is None:
            current = 0
        if not isinstance(current, (int, float)) or isinstance(current, bool):
            raise TypeError(f"value at {path} is not a number")
        return current + by

    with reporting_errors(), open_client(config) as client:
        result = client.reference(path).transaction(add, make_context(timeout))
    success(f"{path} = {result}")


@app.command()
def version():
    """Show rtdb version."""
    from .. import __version__

    info(f"rtdb version: {__version__}")


def main():
    """Main CLI entry point."""
    try:
        app()
    except KeyboardInterrupt:
        warning("\nInterrupted by user")
        raise typer.Exit(1)


if __name__ == "__main__":
    main()
