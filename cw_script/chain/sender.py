"""
cw_script.chain.sender
======================

`Sender` is the signing + broadcasting handle shared by every contract of a
group. It pairs an `LcdClient` (transport) with a `TxSigner`, the external
collaborator that owns the keys.

The signer is deliberately narrow:

    class MySigner:
        address = "terra1..."

        async def sign(self, messages, *, memo=None) -> bytes:
            # build TxBody/AuthInfo, estimate fee, fetch account sequence,
            # sign, return the protobuf-encoded TxRaw bytes
            ...

Anything that satisfies `TxSigner` works (a wrapper around a wallet library,
a hardware signer, a test double).
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, Sequence, runtime_checkable

from ..logging import get_logger
from .lcd import LcdClient
from .types import Coin, Msg, MsgInstantiateContract, MsgStoreCode, TxOutcome

log = get_logger(__name__)


@runtime_checkable
class TxSigner(Protocol):
    """Signs messages into broadcast-ready tx bytes."""

    address: str

    async def sign(self, messages: Sequence[Msg], *, memo: Optional[str] = None) -> bytes: ...


class Sender:
    """
    Shared chain handle: one per group, immutable after construction, safe to
    use from several `ContractInstance`s at once.
    """

    __slots__ = ("lcd", "signer")

    def __init__(self, lcd: LcdClient, signer: TxSigner) -> None:
        self.lcd = lcd
        self.signer = signer

    def pub_addr(self) -> str:
        return self.signer.address

    async def broadcast(self, messages: Sequence[Msg], memo: Optional[str] = None) -> TxOutcome:
        """Sign `messages` into a single tx and broadcast it in sync mode."""
        tx_bytes = await self.signer.sign(list(messages), memo=memo)
        resp = await self.lcd.broadcast_sync(tx_bytes)
        log.debug("tx_broadcast", txhash=resp.txhash, code=resp.code, msgs=len(messages))
        return resp

    async def store_code(self, wasm_byte_code: bytes, memo: Optional[str] = None) -> TxOutcome:
        msg = MsgStoreCode(sender=self.pub_addr(), wasm_byte_code=bytes(wasm_byte_code))
        return await self.broadcast([msg], memo=memo)

    async def instantiate(
        self,
        code_id: int,
        init_msg: Any,
        coins: Optional[List[Coin]] = None,
        admin: Optional[str] = None,
        memo: Optional[str] = None,
        label: str = "",
    ) -> TxOutcome:
        msg = MsgInstantiateContract(
            sender=self.pub_addr(),
            code_id=int(code_id),
            msg=init_msg,
            label=label,
            admin=admin,
            funds=list(coins or []),
        )
        return await self.broadcast([msg], memo=memo)

    async def wait_for_tx(self, txhash: str, attempts: int, interval_s: float) -> TxOutcome:
        return await self.lcd.wait_for_tx(txhash, attempts=attempts, interval_s=interval_s)

    async def query(self, contract_addr: str, query: Any) -> Any:
        return await self.lcd.query_contract_smart(contract_addr, query)


__all__ = ["TxSigner", "Sender"]
