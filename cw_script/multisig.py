"""
Wrap a contract execute into a cw3 multisig proposal.

Groups with `proposal=True` never execute directly: the execute becomes a
single wasm action inside a `propose` message sent to the group's multisig,
which the other members then vote on.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from .chain.types import Coin, MsgExecuteContract, coins_to_dicts
from .logging import get_logger
from .msgs import encode_b64_json

log = get_logger(__name__)


class Multisig:
    @staticmethod
    def proposal_actions(json_msg: Any, contract_addr: str, coins: Sequence[Coin]) -> List[Dict[str, Any]]:
        return [
            {
                "wasm": {
                    "execute": {
                        "msg": encode_b64_json(json_msg),
                        "funds": coins_to_dicts(coins),
                        "contract_addr": contract_addr,
                    }
                }
            }
        ]

    @staticmethod
    def create_proposal(
        json_msg: Any,
        group_name: str,
        contract_addr: str,
        multisig_addr: str,
        sender_addr: str,
        coins: Sequence[Coin],
    ) -> MsgExecuteContract:
        """
        Build the execute message that proposes `json_msg` against `contract_addr`.

        Title and description are left empty. The proposal content is not
        validated; a bad payload only shows up when the multisig executes it.
        """
        actions = Multisig.proposal_actions(json_msg, contract_addr, coins)
        msg = {
            "propose": {
                "msgs": actions,
                "title": "",
                "description": "",
            }
        }

        log.debug("proposal_msg", group=group_name, msg=json.dumps(msg))
        log.info("proposed_msgs", group=group_name, multisig=multisig_addr, msgs=json.dumps(actions))

        return MsgExecuteContract.create_from_value(sender_addr, multisig_addr, msg, [])


__all__ = ["Multisig"]
