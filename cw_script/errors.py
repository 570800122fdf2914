"""
cw-script errors.

Typed exception hierarchy raised by the state store, the chain client and the
contract orchestrator, so callers can catch a specific failure mode while
still being able to catch the base :class:`CwScriptError`.

Usage:

    from cw_script.errors import NotFoundError

    raise NotFoundError("no address recorded", data={"group": "core", "contract": "counter"})

All errors expose:
- .code   : stable machine-readable code (snake_case)
- .data   : optional structured payload (dict-like)
- .to_dict() : JSON-friendly rendering for logs and CLI output
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

__all__ = [
    "CwScriptError",
    "ConfigurationError",
    "NotFoundError",
    "StateFileError",
    "SerializationError",
    "ChainCommunicationError",
    "ConfirmationTimeout",
    "MalformedChainResponseError",
    "TxFailedError",
]


class CwScriptError(Exception):
    """
    Base class for cw-script errors.

    Subclasses set `default_code`.
    """

    default_code = "cw_script_error"

    def __init__(
        self,
        message: str = "",
        *,
        code: Optional[str] = None,
        data: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.data: Dict[str, Any] = dict(data) if data else {}

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.message:
            return f"{self.code}: {self.message}"
        return self.code

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data:
            body["data"] = dict(self.data)
        return body


class ConfigurationError(CwScriptError):
    """A required environment value or setting is missing or invalid."""

    default_code = "configuration_error"


class NotFoundError(CwScriptError):
    """An address or code id is absent from the state file."""

    default_code = "not_found"


class StateFileError(CwScriptError):
    """The state file could not be read, parsed or written."""

    default_code = "state_file_error"


class SerializationError(CwScriptError):
    """A payload could not be converted to its canonical JSON form."""

    default_code = "serialization_error"


class ChainCommunicationError(CwScriptError):
    """Transport-level failure talking to the chain (broadcast, poll or query)."""

    default_code = "chain_communication_error"

    def __init__(
        self,
        message: str = "",
        *,
        status: Optional[int] = None,
        code: Optional[str] = None,
        data: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, data=data)
        self.status = status


class ConfirmationTimeout(CwScriptError):
    """A broadcast transaction was not found on chain within the allowed polling attempts."""

    default_code = "confirmation_timeout"

    def __init__(self, txhash: str, attempts: int, interval_s: float) -> None:
        super().__init__(
            f"tx {txhash} not confirmed after {attempts} attempts ({interval_s}s apart)",
            data={"txhash": txhash, "attempts": attempts, "interval_s": interval_s},
        )
        self.txhash = txhash
        self.attempts = attempts


class MalformedChainResponseError(CwScriptError):
    """An expected event attribute is missing from the tx logs or cannot be parsed."""

    default_code = "malformed_chain_response"


class TxFailedError(CwScriptError):
    """A transaction was included in a block but its execution failed."""

    default_code = "tx_failed"

    def __init__(self, txhash: str, tx_code: int, raw_log: str = "", codespace: str = "") -> None:
        super().__init__(
            f"tx {txhash} failed with code {tx_code}: {raw_log}",
            data={"txhash": txhash, "tx_code": tx_code, "codespace": codespace, "raw_log": raw_log},
        )
        self.txhash = txhash
        self.tx_code = tx_code
        self.raw_log = raw_log
