"""CLI interface for inspecting and benchmarking a store."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Mapping
from pathlib import Path
from typing import NoReturn, Optional

import typer
import yaml

from .benchmark import run_benchmark
from .config import StoreOptions, load_options
from .database import delete_store
from .store import MiniStore

app = typer.Typer(help="MiniStore key-value store CLI")

DB_OPTION = typer.Option("ministore.db", "--db", help="Path to the store file")
CONFIG_OPTION = typer.Option(None, "--config", help="YAML options file (overrides --db)")


def _fail(message: str) -> NoReturn:
    typer.secho(f"❌ {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(1)


def _open_store(db: str, config: Optional[str]) -> MiniStore:
    try:
        options = load_options(config) if config else StoreOptions.from_path(db)
        return MiniStore(options=options)
    except FileNotFoundError as e:
        _fail(f"Options file not found: {e}")
    except ValueError as e:
        _fail(f"Invalid options: {e}")
    except sqlite3.Error as e:
        _fail(f"Cannot open store: {e}")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Inspect, edit and benchmark a MiniStore database."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def put(
    key: str = typer.Argument(..., help="Key to write"),
    value: str = typer.Argument(..., help="Value to store"),
    db: str = DB_OPTION,
    config: Optional[str] = CONFIG_OPTION,
) -> None:
    """Create or update a key."""
    store = _open_store(db, config)
    try:
        store.put(key, value)
    except ValueError as e:
        _fail(str(e))
    except sqlite3.Error as e:
        _fail(f"Database error: {e}")
    typer.secho(f"✅ Stored {key}", fg=typer.colors.GREEN)


@app.command()
def get(
    key: str = typer.Argument(..., help="Key to read"),
    db: str = DB_OPTION,
    config: Optional[str] = CONFIG_OPTION,
) -> None:
    """Print the value stored under a key."""
    store = _open_store(db, config)
    try:
        value = store.get(key, default=None)
    except ValueError as e:
        _fail(str(e))
    except sqlite3.Error as e:
        _fail(f"Database error: {e}")
    if value is None:
        _fail(f"Key not found: {key}")
    typer.echo(value)


@app.command()
def delete(
    key: str = typer.Argument(..., help="Key to remove"),
    db: str = DB_OPTION,
    config: Optional[str] = CONFIG_OPTION,
) -> None:
    """Remove a key (no error if it is missing)."""
    store = _open_store(db, config)
    try:
        store.delete(key)
    except ValueError as e:
        _fail(str(e))
    except sqlite3.Error as e:
        _fail(f"Database error: {e}")
    typer.secho(f"✅ Deleted {key}", fg=typer.colors.GREEN)


@app.command()
def exists(
    key: str = typer.Argument(..., help="Key to check"),
    db: str = DB_OPTION,
    config: Optional[str] = CONFIG_OPTION,
) -> None:
    """Print whether a key exists; exit code 1 when it does not."""
    store = _open_store(db, config)
    try:
        found = store.exists(key)
    except ValueError as e:
        _fail(str(e))
    except sqlite3.Error as e:
        _fail(f"Database error: {e}")
    typer.echo("true" if found else "false")
    if not found:
        raise typer.Exit(1)


@app.command()
def keys(
    like: Optional[str] = typer.Option(None, "--like", help="SQL LIKE pattern, e.g. 'user:%'"),
    db: str = DB_OPTION,
    config: Optional[str] = CONFIG_OPTION,
) -> None:
    """List keys, optionally filtered by a LIKE pattern."""
    store = _open_store(db, config)
    try:
        found = store.keys() if like is None else store.keys_like(like)
    except sqlite3.Error as e:
        _fail(f"Database error: {e}")
    for key in found:
        typer.echo(key)


@app.command()
def batch(
    items_path: str = typer.Argument(..., help="YAML mapping of key to value"),
    db: str = DB_OPTION,
    config: Optional[str] = CONFIG_OPTION,
) -> None:
    """Write every pair from a YAML file in a single transaction."""
    path = Path(items_path)
    if not path.exists():
        _fail(f"Items file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            _fail(f"Malformed items file {path}: {e}")
    if not isinstance(data, Mapping):
        _fail(f"Items file must contain a mapping of key to value: {path}")

    store = _open_store(db, config)
    try:
        count = store.batch_put(list(data.items()))
    except (ValueError, TypeError) as e:
        _fail(f"Invalid batch: {e}")
    except sqlite3.Error as e:
        _fail(f"Database error: {e}")
    typer.secho(f"✅ Stored {count} items", fg=typer.colors.GREEN)


@app.command()
def bench(
    batch_inserts: int = typer.Option(10000, "--batch", min=0, help="Items for the batch phase"),
    puts: int = typer.Option(2000, "--puts", min=0, help="Items for the single put phase"),
    db: str = typer.Option("performance.db", "--db", help="Store file (recreated)"),
    progress: bool = typer.Option(False, "--progress", help="Show progress bars"),
) -> None:
    """Time batch inserts, single puts and gets against a fresh store."""
    try:
        result = run_benchmark(db, batch_inserts=batch_inserts, puts=puts, progress=progress)
    except sqlite3.Error as e:
        _fail(f"Database error: {e}")
    for line in result.summary_lines():
        typer.echo(line)


@app.command()
def drop(
    db: str = DB_OPTION,
) -> None:
    """Delete the store file."""
    if delete_store(db):
        typer.secho(f"✅ Deleted store {db}", fg=typer.colors.GREEN)
    else:
        typer.echo(f"No store at {db}")


if __name__ == "__main__":
    app()
