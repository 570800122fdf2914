"""
Contract lifecycle commands: upload, instantiate, execute, migrate, query.

Transaction commands need a signer. It is loaded from `--signer` /
CW_SCRIPT_SIGNER, an import path "package.module:factory"; the factory is
called with the resolved `Settings` and must return a `TxSigner`.
"""

from __future__ import annotations

import asyncio
import importlib
import json
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Sequence

import typer

from ..chain import Coin, LcdClient, LcdConfig, Sender, TxSigner, parse_coins
from ..config import Settings
from ..contract import ContractInstance
from ..errors import ConfigurationError, CwScriptError


class _QueryOnlySigner:
    """Stand-in for read-only commands; refuses to sign."""

    address = ""

    async def sign(self, messages, *, memo=None) -> bytes:
        raise ConfigurationError("this command cannot sign transactions")


def load_signer(settings: Settings) -> TxSigner:
    spec = settings.signer
    if not spec:
        raise ConfigurationError("no signer configured; pass --signer or set CW_SCRIPT_SIGNER")
    module_name, _, attr = spec.partition(":")
    if not module_name or not attr:
        raise ConfigurationError(f"signer must look like 'package.module:factory', got {spec!r}")
    try:
        factory = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(f"cannot load signer factory {spec!r}: {e}") from e
    signer = factory(settings)
    if not isinstance(signer, TxSigner):
        raise ConfigurationError(f"{spec!r} did not return a TxSigner (needs .address and async .sign)")
    return signer


def _json_arg(raw: str, what: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"{what} is not valid JSON: {e}") from e


def _coins(raw: Optional[Sequence[str]]) -> List[Coin]:
    try:
        return parse_coins(list(raw or []))
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def _echo_json(obj: Any) -> None:
    typer.echo(json.dumps(obj, indent=2, sort_keys=True))


def _run(
    ctx: typer.Context,
    name: str,
    fn: Callable[[ContractInstance], Awaitable[Any]],
    *,
    needs_signer: bool = True,
) -> Any:
    obj = ctx.obj
    settings: Settings = obj.settings

    async def _go() -> Any:
        signer = load_signer(settings) if needs_signer else _QueryOnlySigner()
        lcd_cfg = LcdConfig(url=settings.lcd_url, timeout_s=settings.request_timeout_s)
        async with LcdClient(lcd_cfg) as lcd:
            instance = ContractInstance(name, obj.group, Sender(lcd, signer), settings=settings)
            return await fn(instance)

    try:
        return asyncio.run(_go())
    except CwScriptError as e:
        typer.secho(f"error: {e}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)


def upload(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Contract name"),
    path: Optional[Path] = typer.Option(None, "--path", help="Wasm file (default: $WASM_DIR/<name>.wasm)"),
) -> None:
    """Store NAME's wasm code and record the new code id."""
    outcome = _run(ctx, name, lambda c: c.upload(name, path))
    _echo_json(outcome.to_dict())


def instantiate(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Contract name"),
    msg: str = typer.Argument(..., help="Instantiate message (JSON)"),
    admin: Optional[str] = typer.Option(None, "--admin", help="Contract admin address"),
    coin: Optional[List[str]] = typer.Option(None, "--coin", help="Funds, e.g. 100uluna (repeatable)"),
) -> None:
    """Instantiate NAME from its recorded code id and record the address."""
    payload = _json_arg(msg, "instantiate message")
    funds = _coins(coin)
    outcome = _run(ctx, name, lambda c: c.instantiate(payload, admin=admin, coins=funds))
    _echo_json(outcome.to_dict())


def execute(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Contract name"),
    msg: str = typer.Argument(..., help="Execute message (JSON)"),
    coin: Optional[List[str]] = typer.Option(None, "--coin", help="Funds, e.g. 100uluna (repeatable)"),
) -> None:
    """Execute MSG on NAME (as a proposal when --proposal is set)."""
    payload = _json_arg(msg, "execute message")
    funds = _coins(coin)
    outcome = _run(ctx, name, lambda c: c.execute(payload, coins=funds))
    _echo_json(outcome.to_dict())


def migrate(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Contract name"),
    msg: str = typer.Argument(..., help="Migrate message (JSON)"),
    code_id: Optional[int] = typer.Option(None, "--code-id", min=0, help="Target code id (default: recorded)"),
) -> None:
    """Migrate NAME to a new code id."""
    payload = _json_arg(msg, "migrate message")
    outcome = _run(ctx, name, lambda c: c.migrate(payload, new_code_id=code_id))
    _echo_json(outcome.to_dict())


def query(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Contract name"),
    msg: str = typer.Argument(..., help="Query message (JSON)"),
) -> None:
    """Run a smart query against NAME and print the JSON result."""
    payload = _json_arg(msg, "query message")
    result = _run(ctx, name, lambda c: c.query(payload), needs_signer=False)
    _echo_json(result)


def register(app: typer.Typer) -> None:
    for fn in (upload, instantiate, execute, migrate, query):
        app.command(fn.__name__)(fn)


__all__ = ["register", "load_signer"]
