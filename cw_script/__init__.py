"""
cw-script: deployment scripting for CosmWasm contracts.

Upload wasm, instantiate, execute (directly or through a cw3 multisig
proposal), migrate and query contracts, keeping a JSON record of every
contract's code id and address per deployment group.

    from cw_script import ContractInstance, GroupConfig, Sender
"""

from __future__ import annotations

from .chain import Coin, LcdClient, LcdConfig, Sender, TxOutcome, TxSigner
from .config import GroupConfig, Network, NetworkConfig, Settings, get_settings
from .contract import ContractInstance
from .errors import (ChainCommunicationError, ConfigurationError,
                     ConfirmationTimeout, CwScriptError,
                     MalformedChainResponseError, NotFoundError,
                     SerializationError, StateFileError, TxFailedError)
from .interfaces import ContractAPI, ContractInterface, JsonContract
from .multisig import Multisig
from .state import StateStore
from .version import __version__
from .wait import NetworkWaitPolicy

__all__ = [
    "__version__",
    # config
    "GroupConfig",
    "Network",
    "NetworkConfig",
    "Settings",
    "get_settings",
    # core
    "ContractInstance",
    "ContractAPI",
    "ContractInterface",
    "JsonContract",
    "Multisig",
    "NetworkWaitPolicy",
    "StateStore",
    # chain
    "Coin",
    "LcdClient",
    "LcdConfig",
    "Sender",
    "TxOutcome",
    "TxSigner",
    # errors
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
