"""
cw_script.contract
==================

`ContractInstance` drives one logical contract of a group through its life:

    upload       store the wasm, wait for the block, record the code id
    instantiate  create the contract, wait for the block, record the address
    execute      sign + broadcast (directly, or as a multisig proposal)
    migrate      sign + broadcast a migration to a new code id
    query        read-only smart query

Typical usage
-------------
    from cw_script import ContractInstance, GroupConfig, Sender
    from cw_script.chain import LcdClient, LcdConfig

    group = GroupConfig.from_settings("core")
    sender = Sender(LcdClient(LcdConfig(group.network_config.lcd_url)), my_signer)
    counter = ContractInstance("counter", group, sender)

    await counter.upload()
    await counter.instantiate({"count": 0})
    await counter.execute({"increment": {}})
    print(await counter.query({"get_count": {}}))

Design notes
------------
* upload / instantiate wait for block inclusion because their results (code
  id, address) only exist in the block's event log. execute / migrate return
  as soon as the node accepts the tx in CheckTx; a nonzero code there is
  logged and handed back in the outcome, never raised.
* Nothing is written to the state file unless the chain confirmed the tx and
  the expected attribute was found, so a failed upload / instantiate can be
  re-run as is.
* The state file is re-read on every call; two instances sharing it see each
  other's writes, but concurrent writers race (last writer wins).
"""

from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Any, Generic, List, Optional, Type, Union

from .chain.sender import Sender
from .chain.types import Coin, Msg, MsgExecuteContract, MsgMigrateContract, TxOutcome
from .config import GroupConfig, Settings, get_settings
from .errors import (ConfigurationError, MalformedChainResponseError,
                     TxFailedError)
from .interfaces import (ContractInterface, ExecT, InitT, JsonContract,
                         MigrateT, QueryT)
from .logging import get_logger
from .msgs import to_json_value
from .multisig import Multisig
from .state import StateStore
from .wait import NetworkWaitPolicy

log = get_logger(__name__)

_UINT_RE = re.compile(r"[0-9]+")


class ContractInstance(Generic[InitT, ExecT, QueryT, MigrateT]):
    def __init__(
        self,
        name: str,
        group_config: GroupConfig,
        sender: Sender,
        interface: Type[ContractInterface] = JsonContract,
        *,
        settings: Optional[Settings] = None,
        wait_policy: Optional[NetworkWaitPolicy] = None,
        store: Optional[StateStore] = None,
    ) -> None:
        self.name = name
        self.group_config = group_config
        self.sender = sender
        self.interface = interface
        self.settings = settings or get_settings()
        self.wait_policy = wait_policy or NetworkWaitPolicy.from_settings(self.settings)
        self.store = store or StateStore(group_config.file_path)
        self.check_scaffold()

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"ContractInstance(name={self.name!r}, group={self.group_config.name!r})"

    # --- state helpers ----------------------------------------------------

    def check_scaffold(self) -> None:
        self.store.ensure_scaffold(self.group_config.name, self.name)

    def get_address(self) -> str:
        return self.store.get_addr(self.group_config.name, self.name)

    def get_code_id(self) -> int:
        return self.store.get_code_id(self.group_config.name, self.name)

    def save_code_id(self, code_id: int) -> None:
        self.store.set_code_id(self.group_config.name, self.name, code_id)

    def save_contract_address(self, contract_address: str) -> None:
        self.store.set_addr(self.group_config.name, self.name, contract_address)

    def save_other_contract_address(self, contract_name: str, contract_address: str) -> None:
        """Record the address of a contract this one created (e.g. via a factory)."""
        self.store.set_addr(self.group_config.name, contract_name, contract_address)

    # --- internals --------------------------------------------------------

    @property
    def memo(self) -> str:
        return f"Contract: {self.name}, Group: {self.group_config.name}"

    def _serialize(self, kind: str, payload: Any) -> Any:
        return to_json_value(self.interface.coerce(kind, payload))

    async def _settle(self) -> None:
        await self.wait_policy.settle(self.group_config.network)

    async def _confirm(self, resp: TxOutcome) -> TxOutcome:
        if not resp.ok:
            raise TxFailedError(resp.txhash, int(resp.code or 0), resp.raw_log, resp.codespace)
        result = await self.sender.wait_for_tx(
            resp.txhash,
            attempts=self.settings.poll_attempts,
            interval_s=self.settings.poll_interval_s,
        )
        if not result.ok:
            raise TxFailedError(result.txhash, int(result.code or 0), result.raw_log, result.codespace)
        return result

    @staticmethod
    def _attribute(result: TxOutcome, event_type: str, key: str) -> str:
        attrs = result.get_attribute_from_logs(event_type, key)
        if not attrs or not attrs[0][1]:
            raise MalformedChainResponseError(
                f"tx {result.txhash} has no {event_type}.{key} attribute",
                data={"txhash": result.txhash, "event": event_type, "key": key},
            )
        return attrs[0][1]

    def _wasm_path(self, name: str, path: Optional[Union[str, Path]]) -> Path:
        if path is not None:
            return Path(path)
        if self.settings.wasm_dir is None:
            raise ConfigurationError(
                "no wasm path given and WASM_DIR is not set",
                data={"contract": name},
            )
        return Path(self.settings.wasm_dir) / f"{name}.wasm"

    async def _broadcast_accept(self, msg: Msg) -> TxOutcome:
        resp = await self.sender.broadcast([msg])
        if resp.code:
            log.error(
                "tx_rejected",
                contract=self.name,
                txhash=resp.txhash,
                code=resp.code,
                codespace=resp.codespace,
                raw_log=resp.raw_log,
            )
            print(f"Transaction returned a {resp.code} {resp.txhash}", file=sys.stderr)
        else:
            log.info("tx_accepted", contract=self.name, txhash=resp.txhash)
        await self._settle()
        return resp

    # --- operations -------------------------------------------------------

    async def upload(
        self, name: Optional[str] = None, path: Optional[Union[str, Path]] = None
    ) -> TxOutcome:
        name = name or self.name
        wasm_path = self._wasm_path(name, path)
        log.debug("wasm_path", contract=self.name, path=str(wasm_path))
        try:
            wasm = wasm_path.read_bytes()
        except FileNotFoundError as e:
            raise ConfigurationError(
                f"wasm artifact not found: {wasm_path}", data={"path": str(wasm_path)}
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"cannot read wasm artifact {wasm_path}: {e}", data={"path": str(wasm_path)}
            ) from e

        resp = await self.sender.store_code(wasm, memo=self.memo)
        log.debug("uploaded", contract=self.name, txhash=resp.txhash)

        result = await self._confirm(resp)
        raw = self._attribute(result, "store_code", "code_id")
        if not _UINT_RE.fullmatch(raw):
            raise MalformedChainResponseError(
                f"code_id {raw!r} is not an unsigned integer", data={"txhash": result.txhash}
            )
        code_id = int(raw)

        log.info("code_uploaded", contract=self.name, code_id=code_id, txhash=result.txhash)
        self.save_code_id(code_id)
        await self._settle()
        return result

    async def instantiate(
        self,
        init_msg: InitT,
        admin: Optional[str] = None,
        coins: Optional[List[Coin]] = None,
    ) -> TxOutcome:
        code_id = self.get_code_id()
        msg = self._serialize("init", init_msg)

        resp = await self.sender.instantiate(
            code_id,
            msg,
            coins=list(coins or []),
            admin=admin,
            memo=self.memo,
            label=self.name,
        )
        result = await self._confirm(resp)
        address = self._attribute(result, "instantiate_contract", "contract_address")

        log.info("contract_instantiated", contract=self.name, address=address, txhash=result.txhash)
        self.save_contract_address(address)
        await self._settle()
        return result

    async def execute(self, exec_msg: ExecT, coins: Optional[List[Coin]] = None) -> TxOutcome:
        contract = self.get_address()
        msg = self._serialize("execute", exec_msg)
        coins = list(coins or [])
        sender_addr = self.sender.pub_addr()
        log.debug("execute", contract=self.name, address=contract)

        send: MsgExecuteContract
        if self.group_config.proposal:
            multisig = self.settings.multisig_address(
                self.group_config.network, self.group_config.name
            )
            send = Multisig.create_proposal(
                msg,
                self.group_config.name,
                contract,
                multisig,
                sender_addr,
                coins,
            )
        else:
            send = MsgExecuteContract.create_from_value(sender_addr, contract, msg, coins)

        return await self._broadcast_accept(send)

    async def migrate(self, migrate_msg: MigrateT, new_code_id: Optional[int] = None) -> TxOutcome:
        contract = self.get_address()
        code_id = self.get_code_id() if new_code_id is None else int(new_code_id)
        msg = self._serialize("migrate", migrate_msg)
        send = MsgMigrateContract(
            sender=self.sender.pub_addr(), contract=contract, code_id=code_id, msg=msg
        )
        return await self._broadcast_accept(send)

    async def query(self, query_msg: QueryT) -> Any:
        contract = self.get_address()
        msg = self._serialize("query", query_msg)
        return await self.sender.query(contract, msg)


__all__ = ["ContractInstance"]
