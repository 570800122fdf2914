"""
cw-script - command-line front end for contract deployments.

Global options:
  --group TEXT               Deployment group (state file section)
  --network TEXT             local, testnet or mainnet
  --state-file PATH          JSON state file
  --lcd-url TEXT             LCD endpoint
  --chain-id TEXT            Chain id
  --proposal / --no-proposal Route executes through the group multisig
  --signer TEXT              Signer factory "module:callable"

Examples:
  cw-script --group core state show
  cw-script --group core upload counter --path ./artifacts/counter.wasm
  cw-script --group core instantiate counter '{"count": 0}'
  cw-script --group core execute counter '{"increment": {}}' --coin 1000uluna
  cw-script --group core query counter '{"get_count": {}}'

Configuration is resolved flags first, then CW_SCRIPT_* environment
variables / `.env`, then built-in defaults (see cw_script.config).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from pydantic import ValidationError

from ..config import GroupConfig, NetworkConfig, Settings
from ..errors import ConfigurationError
from . import contract, state

app = typer.Typer(
    name="cw-script",
    help="Deploy and drive CosmWasm contracts",
    no_args_is_help=True,
    add_completion=False,
)


@dataclass
class Ctx:
    settings: Settings
    group: GroupConfig


@app.callback()
def main_callback(
    ctx: typer.Context,
    group: str = typer.Option("default", "--group", "-g", help="Deployment group", envvar="CW_SCRIPT_GROUP"),
    network: Optional[str] = typer.Option(None, "--network", help="local, testnet or mainnet"),
    state_file: Optional[Path] = typer.Option(None, "--state-file", help="JSON state file"),
    lcd_url: Optional[str] = typer.Option(None, "--lcd-url", help="LCD (REST) endpoint"),
    chain_id: Optional[str] = typer.Option(None, "--chain-id", help="Chain id"),
    proposal: bool = typer.Option(
        False,
        "--proposal/--no-proposal",
        help="Send executes as multisig proposals",
        envvar="CW_SCRIPT_PROPOSAL",
    ),
    signer: Optional[str] = typer.Option(None, "--signer", help='Signer factory "module:callable"'),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR"),
) -> None:
    """
    cw-script: upload, instantiate, execute, migrate and query contracts.
    """
    overrides: Dict[str, Any] = {
        "network": network,
        "state_file": state_file,
        "lcd_url": lcd_url,
        "chain_id": chain_id,
        "signer": signer,
        "log_level": log_level,
    }
    try:
        settings = Settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        raise typer.BadParameter(str(e)) from e

    from ..logging import setup_logging

    setup_logging(level=settings.log_level.upper(), log_format=settings.log_format)

    try:
        network_config = NetworkConfig.from_settings(settings)
    except ConfigurationError as e:  # pragma: no cover - validated by Settings
        raise typer.BadParameter(e.message) from e

    ctx.obj = Ctx(
        settings=settings,
        group=GroupConfig(
            name=group,
            proposal=proposal,
            network_config=network_config,
            file_path=Path(settings.state_file),
        ),
    )


app.add_typer(state.app, name="state")
contract.register(app)


def main() -> None:
    """Entry point for the cw-script console script."""
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
