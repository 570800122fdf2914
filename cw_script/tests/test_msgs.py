from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Optional

import pytest
from pydantic import BaseModel, Field

from cw_script.chain.types import Coin, Msg
from cw_script.errors import SerializationError
from cw_script.msgs import canonical_json, encode_b64_json, to_json_value


class Transfer(BaseModel):
    recipient: str
    amount: str
    memo: Optional[str] = None
    msg_type: str = Field("transfer", alias="type")


@dataclass
class Increment:
    by: int = 1


def test_canonical_json_is_compact_and_sorted():
    assert canonical_json({"b": [1, {"z": 0, "a": None}], "a": "x"}) == '{"a":"x","b":[1,{"a":null,"z":0}]}'


def test_encode_increment():
    assert encode_b64_json({"increment": {}}) == "eyJpbmNyZW1lbnQiOnt9fQ=="


def test_non_ascii_is_utf8():
    encoded = encode_b64_json({"label": "café"})
    assert base64.b64decode(encoded) == '{"label":"café"}'.encode("utf-8")


def test_pydantic_models_use_aliases_and_drop_none():
    assert to_json_value(Transfer(recipient="terra1r", amount="5")) == {
        "recipient": "terra1r",
        "amount": "5",
        "type": "transfer",
    }


def test_dataclasses_and_to_dict_objects():
    assert to_json_value({"increment": Increment(3)}) == {"increment": {"by": 3}}
    assert to_json_value([Coin("uluna", 7)]) == [{"denom": "uluna", "amount": "7"}]


@pytest.mark.parametrize(
    "bad",
    [
        {1: "int key"},
        {"x": float("nan")},
        {"x": object()},
        {"x": b"bytes"},
    ],
)
def test_unserializable_payloads(bad):
    with pytest.raises(SerializationError):
        canonical_json(bad)


def test_msg_base_is_abstract():
    with pytest.raises(TypeError):
        Msg()

    class Incomplete(Msg):
        type_url = "/example.Incomplete"

    with pytest.raises(TypeError):
        Incomplete()
