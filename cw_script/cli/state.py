"""Inspect and patch the contract state file."""

from __future__ import annotations

import json

import typer

from ..errors import CwScriptError
from ..state import StateStore

app = typer.Typer(help="Inspect and edit recorded addresses and code ids.")


def _store(ctx: typer.Context) -> tuple[StateStore, str]:
    obj = ctx.obj
    return StateStore(obj.group.file_path), obj.group.name


def _fail(e: CwScriptError) -> None:
    typer.secho(f"error: {e}", err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


@app.command("show")
def show(ctx: typer.Context) -> None:
    """Print every contract record of the group."""
    store, group = _store(ctx)
    try:
        typer.echo(json.dumps(store.records(group), indent=2, sort_keys=True))
    except CwScriptError as e:
        _fail(e)


@app.command("addr")
def addr(ctx: typer.Context, name: str = typer.Argument(..., help="Contract name")) -> None:
    """Print the recorded address of NAME."""
    store, group = _store(ctx)
    try:
        typer.echo(store.get_addr(group, name))
    except CwScriptError as e:
        _fail(e)


@app.command("code-id")
def code_id(ctx: typer.Context, name: str = typer.Argument(..., help="Contract name")) -> None:
    """Print the recorded code id of NAME."""
    store, group = _store(ctx)
    try:
        typer.echo(str(store.get_code_id(group, name)))
    except CwScriptError as e:
        _fail(e)


@app.command("set-addr")
def set_addr(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Contract name"),
    address: str = typer.Argument(..., help="Contract address"),
) -> None:
    """Record ADDRESS for NAME (e.g. a contract created by a factory)."""
    store, group = _store(ctx)
    try:
        store.set_addr(group, name, address)
    except CwScriptError as e:
        _fail(e)
    typer.echo(f"{group}/{name} addr = {address}")


@app.command("set-code-id")
def set_code_id(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Contract name"),
    value: int = typer.Argument(..., min=0, help="Code id"),
) -> None:
    """Record code id VALUE for NAME."""
    store, group = _store(ctx)
    try:
        store.set_code_id(group, name, value)
    except CwScriptError as e:
        _fail(e)
    typer.echo(f"{group}/{name} code_id = {value}")
