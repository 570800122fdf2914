"""
Chain client pieces: wire types, the LCD transport and the shared `Sender`.
"""

from __future__ import annotations

from .lcd import LcdClient, LcdConfig
from .sender import Sender, TxSigner
from .types import (Coin, Msg, MsgExecuteContract, MsgInstantiateContract,
                    MsgMigrateContract, MsgStoreCode, TxOutcome, parse_coins)

__all__ = [
    "Coin",
    "LcdClient",
    "LcdConfig",
    "Msg",
    "MsgExecuteContract",
    "MsgInstantiateContract",
    "MsgMigrateContract",
    "MsgStoreCode",
    "Sender",
    "TxOutcome",
    "TxSigner",
    "parse_coins",
]
