"""
Canonical JSON helpers for contract messages.

Contract payloads (instantiate / execute / query / migrate) may be given as:
- plain JSON values (dict / list / str / int / float / bool / None),
- pydantic models (dumped in JSON mode, by alias, without None fields),
- dataclasses,
- any object exposing ``to_dict()``.

`to_json_value` reduces all of these to plain JSON values; `canonical_json`
renders them compactly with sorted keys, which is the byte form embedded
(base64) in multisig proposals.
"""

from __future__ import annotations

import base64
import dataclasses
import json
import math
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel

from .errors import SerializationError

JSONValue = Any


def to_json_value(payload: Any) -> JSONValue:
    """Convert `payload` into plain JSON values or raise SerializationError."""
    if isinstance(payload, BaseModel):
        try:
            return payload.model_dump(mode="json", by_alias=True, exclude_none=True)
        except Exception as e:  # pydantic raises its own serialization errors
            raise SerializationError(
                f"cannot serialize {type(payload).__name__}: {e}"
            ) from e
    if payload is None or isinstance(payload, (bool, str, int)):
        return payload
    if isinstance(payload, float):
        if math.isnan(payload) or math.isinf(payload):
            raise SerializationError(f"non-finite float is not valid JSON: {payload!r}")
        return payload
    if isinstance(payload, Enum):
        return to_json_value(payload.value)
    if dataclasses.is_dataclass(payload) and not isinstance(payload, type):
        return to_json_value(
            {f.name: getattr(payload, f.name) for f in dataclasses.fields(payload)}
        )
    if isinstance(payload, Mapping):
        out = {}
        for k, v in payload.items():
            if not isinstance(k, str):
                raise SerializationError(f"JSON object keys must be strings, got {k!r}")
            out[k] = to_json_value(v)
        return out
    if isinstance(payload, (list, tuple)):
        return [to_json_value(v) for v in payload]
    to_dict = getattr(payload, "to_dict", None)
    if callable(to_dict):
        return to_json_value(to_dict())
    raise SerializationError(f"unsupported payload type: {type(payload).__name__}")


def canonical_json(payload: Any) -> str:
    """Compact JSON with sorted keys."""
    return json.dumps(
        to_json_value(payload), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )


def encode_b64_json(payload: Any) -> str:
    """Base64 of the canonical JSON bytes, as embedded in wasm CosmosMsgs."""
    return base64.b64encode(canonical_json(payload).encode("utf-8")).decode("ascii")


__all__ = ["JSONValue", "to_json_value", "canonical_json", "encode_b64_json"]
