"""Typer-based CLI for inspecting keyreg catalogs."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from keyreg.catalog import Catalog, build_catalog
from keyreg.configuration import load_config
from keyreg.errors import RegistryError

app = typer.Typer(
    help="Inspect named-item catalogs: list, match, resolve and show selections.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    help="Path to a YAML catalog (defaults to the packaged example).",
)
CASE_INSENSITIVE_OPTION = typer.Option(
    False,
    "--case-insensitive",
    help="Match names and wildcard prefixes ignoring case.",
)
VERBOSE_OPTION = typer.Option(False, "--verbose", help="Enable debug logging.")
TABLE_OPTION = typer.Option(False, "--table", help="Render output as a table.")
REQUIRE_OPTION = typer.Option(
    False, "--require", help="Fail when any pattern matches nothing."
)


@dataclass
class RuntimeState:
    catalog: Catalog
    config_path: Path | None


def _json_default(value: object) -> object:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return repr(value)


def _emit(payload: Mapping[str, object], table: bool, title: str) -> None:
    if table:
        table_obj = Table(title=title)
        table_obj.add_column("Key", style="bold")
        table_obj.add_column("Value")
        for key, value in payload.items():
            rendered = (
                json.dumps(value, indent=2, default=_json_default)
                if isinstance(value, (Mapping, list))
                else str(value)
            )
            table_obj.add_row(key, rendered)
        console.print(table_obj)
    else:
        typer.echo(json.dumps(dict(payload), indent=2, default=_json_default))


def _fail(message: str) -> NoReturn:
    err_console.print(Text.assemble(("Error: ", "red"), message), soft_wrap=True)
    raise typer.Exit(code=1)


def get_state(ctx: typer.Context) -> RuntimeState:
    state = ctx.obj
    if not isinstance(state, RuntimeState):  # pragma: no cover - defensive
        raise RuntimeError(
            "CLI state is uninitialised. Call through typer entry point."
        )
    return state


@app.callback()
def main(
    ctx: typer.Context,
    config_file: Path | None = CONFIG_OPTION,
    case_insensitive: bool = CASE_INSENSITIVE_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )
    overrides: dict[str, object] = {}
    if case_insensitive:
        overrides["matching"] = {"case_sensitive": False}
    try:
        config = load_config(config_path=config_file, overrides=overrides)
        catalog = build_catalog(config)
    except RegistryError as exc:
        _fail(str(exc))
    ctx.obj = RuntimeState(catalog=catalog, config_path=config_file)


@app.command("names")
def names(ctx: typer.Context, table: bool = TABLE_OPTION) -> None:
    registry = get_state(ctx).catalog.registry
    payload = {
        "count": len(registry),
        "names": registry.get_all_item_names(),
    }
    _emit(payload, table, title="Registered Names")


@app.command("match")
def match(
    ctx: typer.Context,
    patterns: list[str] = typer.Argument(..., help="Names or prefixes ending in '*'."),
    require: bool = REQUIRE_OPTION,
    table: bool = TABLE_OPTION,
) -> None:
    registry = get_state(ctx).catalog.registry
    try:
        matched = (
            registry.ensure_item_names_like(patterns)
            if require
            else registry.get_item_names_like(patterns)
        )
    except RegistryError as exc:
        _fail(str(exc))
    payload = {"patterns": patterns, "names": matched}
    _emit(payload, table, title="Matching Names")


@app.command("resolve")
def resolve(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Command-style input to resolve."),
    table: bool = TABLE_OPTION,
) -> None:
    registry = get_state(ctx).catalog.registry
    found = registry.get_longest_prefix_match(text)
    if found is None:
        _fail(f"No registered name is a prefix of '{text}'")
    payload = {
        "name": found.name,
        "item": found.item,
        "remainder": found.remainder,
    }
    _emit(payload, table, title="Resolved Input")


@app.command("show")
def show(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Exact registered name."),
    table: bool = TABLE_OPTION,
) -> None:
    registry = get_state(ctx).catalog.registry
    try:
        item = registry.require_item_by_name(name)
    except RegistryError as exc:
        _fail(str(exc))
    _emit({"name": name, "item": item}, table, title="Item")


@app.command("active")
def active(ctx: typer.Context, table: bool = TABLE_OPTION) -> None:
    catalog = get_state(ctx).catalog
    try:
        payload = {
            "active": catalog.single.get_active_item_entry(),
            "enabled": catalog.multi.get_active_item_entries(),
        }
    except RegistryError as exc:
        _fail(str(exc))
    _emit(payload, table, title="Selections")


def main_cli() -> None:  # pragma: no cover - Typer entry
    app()


if __name__ == "__main__":  # pragma: no cover - CLI entry
    main_cli()
