"""
cw_script.cli
=============

Typer-based command-line interface, exposed as the `cw-script` console script.
Typer is only imported when the CLI is actually used.

    $ cw-script --group core state show
    $ cw-script --group core query counter '{"get_count": {}}'
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, List

__all__: List[str] = ["app", "main"]

_SUBMODULE = "cw_script.cli.main"
_EXPOSE = ("app", "main")


def __getattr__(name: str) -> Any:  # PEP 562 lazy attribute access
    if name in _EXPOSE:
        return getattr(import_module(_SUBMODULE), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
