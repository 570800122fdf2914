from __future__ import annotations

import base64
import json

from cw_script.chain.types import Coin, MsgExecuteContract
from cw_script.multisig import Multisig


def test_proposal_wraps_execute_for_multisig():
    msg = Multisig.create_proposal({"increment": {}}, "core", "A", "M", "S", [])

    assert isinstance(msg, MsgExecuteContract)
    assert msg.sender == "S"
    assert msg.contract == "M"
    assert msg.funds == []

    propose = msg.msg["propose"]
    assert propose["title"] == ""
    assert propose["description"] == ""
    assert len(propose["msgs"]) == 1

    execute = propose["msgs"][0]["wasm"]["execute"]
    assert execute["contract_addr"] == "A"
    assert execute["funds"] == []
    assert execute["msg"] == base64.b64encode(b'{"increment":{}}').decode()
    assert json.loads(base64.b64decode(execute["msg"])) == {"increment": {}}


def test_proposal_carries_funds_on_inner_action_only():
    coins = [Coin("uluna", 1000), Coin("uusd", 5)]
    msg = Multisig.create_proposal({"deposit": {"amount": "1"}}, "core", "A", "M", "S", coins)

    inner = msg.msg["propose"]["msgs"][0]["wasm"]["execute"]
    assert inner["funds"] == [
        {"denom": "uluna", "amount": "1000"},
        {"denom": "uusd", "amount": "5"},
    ]
    assert msg.funds == []


def test_proposal_payload_is_canonical():
    a = Multisig.create_proposal({"b": 1, "a": {"y": 2, "x": 1}}, "g", "A", "M", "S", [])
    b = Multisig.create_proposal({"a": {"x": 1, "y": 2}, "b": 1}, "g", "A", "M", "S", [])

    enc = a.msg["propose"]["msgs"][0]["wasm"]["execute"]["msg"]
    assert enc == b.msg["propose"]["msgs"][0]["wasm"]["execute"]["msg"]
    assert base64.b64decode(enc) == b'{"a":{"x":1,"y":2},"b":1}'


def test_proposal_proto_json():
    msg = Multisig.create_proposal({"increment": {}}, "core", "A", "M", "S", [])
    d = msg.to_dict()
    assert d["@type"] == "/cosmwasm.wasm.v1.MsgExecuteContract"
    assert d["contract"] == "M"
    assert "propose" in d["msg"]
