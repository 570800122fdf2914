"""
Wire types shared by the chain client and the orchestrator.

- `Coin` and `parse_coins` for funds ("100uluna,5uusd").
- CosmWasm `Msg*` messages rendered as proto-JSON (``"@type"`` + fields), the
  form handed to the signer.
- `TxOutcome`: the chain's view of a transaction (hash, code, logs/events),
  built from an LCD ``tx_response`` object.
"""

from __future__ import annotations

import abc
import base64
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ..msgs import JSONValue, to_json_value

_COIN_RE = re.compile(r"^\s*(\d+)\s*([a-zA-Z][a-zA-Z0-9/:._-]{1,127})\s*$")


@dataclass(frozen=True)
class Coin:
    denom: str
    amount: int

    def __post_init__(self) -> None:
        if int(self.amount) < 0:
            raise ValueError("coin amount must be non-negative")

    @classmethod
    def parse(cls, s: str) -> "Coin":
        m = _COIN_RE.match(s)
        if not m:
            raise ValueError(f"invalid coin {s!r}, expected e.g. '100uluna'")
        return cls(denom=m.group(2), amount=int(m.group(1)))

    def to_dict(self) -> Dict[str, str]:
        # Amounts are strings on the wire (Uint128).
        return {"denom": self.denom, "amount": str(int(self.amount))}


def parse_coins(value: Union[None, str, Iterable[Union[str, Coin]]]) -> List[Coin]:
    """Accept None, "100uluna,5uusd", or an iterable of strings / Coins."""
    if value is None:
        return []
    if isinstance(value, str):
        parts: Iterable[Union[str, Coin]] = [p for p in value.split(",") if p.strip()]
    else:
        parts = value
    return [c if isinstance(c, Coin) else Coin.parse(c) for c in parts]


def coins_to_dicts(coins: Sequence[Coin]) -> List[Dict[str, str]]:
    return [c.to_dict() for c in coins]


# --- messages -----------------------------------------------------------------


class Msg(abc.ABC):
    """Base for messages a `TxSigner` knows how to sign."""

    type_url: str = ""

    @abc.abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Proto-JSON form, including the "@type" key."""


@dataclass
class MsgStoreCode(Msg):
    sender: str
    wasm_byte_code: bytes

    type_url = "/cosmwasm.wasm.v1.MsgStoreCode"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "@type": self.type_url,
            "sender": self.sender,
            "wasm_byte_code": base64.b64encode(self.wasm_byte_code).decode("ascii"),
        }


@dataclass
class MsgInstantiateContract(Msg):
    sender: str
    code_id: int
    msg: JSONValue
    label: str = ""
    admin: Optional[str] = None
    funds: List[Coin] = field(default_factory=list)

    type_url = "/cosmwasm.wasm.v1.MsgInstantiateContract"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "@type": self.type_url,
            "sender": self.sender,
            "admin": self.admin or "",
            "code_id": str(int(self.code_id)),
            "label": self.label,
            "msg": self.msg,
            "funds": coins_to_dicts(self.funds),
        }


@dataclass
class MsgExecuteContract(Msg):
    sender: str
    contract: str
    msg: JSONValue
    funds: List[Coin] = field(default_factory=list)

    type_url = "/cosmwasm.wasm.v1.MsgExecuteContract"

    @classmethod
    def create_from_value(
        cls, sender: str, contract: str, msg: Any, coins: Sequence[Coin] = ()
    ) -> "MsgExecuteContract":
        return cls(sender=sender, contract=contract, msg=to_json_value(msg), funds=list(coins))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "@type": self.type_url,
            "sender": self.sender,
            "contract": self.contract,
            "msg": self.msg,
            "funds": coins_to_dicts(self.funds),
        }


@dataclass
class MsgMigrateContract(Msg):
    sender: str
    contract: str
    code_id: int
    msg: JSONValue

    type_url = "/cosmwasm.wasm.v1.MsgMigrateContract"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "@type": self.type_url,
            "sender": self.sender,
            "contract": self.contract,
            "code_id": str(int(self.code_id)),
            "msg": self.msg,
        }


# --- outcomes -----------------------------------------------------------------


def _iter_events(obj: Any) -> Iterable[Dict[str, Any]]:
    if isinstance(obj, list):
        for ev in obj:
            if isinstance(ev, dict):
                yield ev


@dataclass
class TxOutcome:
    """
    A transaction as reported by the chain.

    `code` is None when the chain reports success (code 0).
    """

    txhash: str
    code: Optional[int] = None
    codespace: str = ""
    raw_log: str = ""
    height: Optional[int] = None
    gas_wanted: Optional[int] = None
    gas_used: Optional[int] = None
    logs: List[Dict[str, Any]] = field(default_factory=list)
    events: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_lcd(cls, tx_response: Dict[str, Any]) -> "TxOutcome":
        def _int(v: Any) -> Optional[int]:
            try:
                return int(v) if v not in (None, "") else None
            except (TypeError, ValueError):
                return None

        code = _int(tx_response.get("code"))
        return cls(
            txhash=str(tx_response.get("txhash") or ""),
            code=code or None,
            codespace=str(tx_response.get("codespace") or ""),
            raw_log=str(tx_response.get("raw_log") or ""),
            height=_int(tx_response.get("height")) or None,
            gas_wanted=_int(tx_response.get("gas_wanted")),
            gas_used=_int(tx_response.get("gas_used")),
            logs=list(tx_response.get("logs") or []),
            events=list(tx_response.get("events") or []),
        )

    @property
    def ok(self) -> bool:
        return not self.code

    def get_attribute_from_logs(self, event_type: str, key: str) -> List[Tuple[str, str]]:
        """
        Collect (key, value) pairs of `key` in events of `event_type`.

        Per-message logs are searched first; the flat `events` list (newer
        Cosmos SDK versions leave `logs` empty) is the fallback.
        """
        found: List[Tuple[str, str]] = []
        for entry in self.logs:
            for ev in _iter_events(entry.get("events") if isinstance(entry, dict) else None):
                found.extend(_match(ev, event_type, key))
        if not found:
            for ev in _iter_events(self.events):
                found.extend(_match(ev, event_type, key))
        return found

    def to_dict(self) -> Dict[str, Any]:
        return {
            "txhash": self.txhash,
            "code": self.code,
            "codespace": self.codespace,
            "raw_log": self.raw_log,
            "height": self.height,
            "gas_wanted": self.gas_wanted,
            "gas_used": self.gas_used,
        }


def _match(ev: Dict[str, Any], event_type: str, key: str) -> List[Tuple[str, str]]:
    if ev.get("type") != event_type:
        return []
    out = []
    for attr in ev.get("attributes") or []:
        if isinstance(attr, dict) and attr.get("key") == key:
            out.append((key, str(attr.get("value", ""))))
    return out


__all__ = [
    "Coin",
    "parse_coins",
    "coins_to_dicts",
    "Msg",
    "MsgStoreCode",
    "MsgInstantiateContract",
    "MsgExecuteContract",
    "MsgMigrateContract",
    "TxOutcome",
]
