"""
Contract message families and the operations every contract exposes.

A contract type declares the shapes of its instantiate / execute / query /
migrate payloads by subclassing `ContractInterface`:

    class CounterInit(BaseModel):
        count: int

    class Counter(ContractInterface[CounterInit, dict, dict, dict]):
        init_msg = CounterInit

`ContractInstance` is generic over such a family. The only thing it needs from
a payload is that `cw_script.msgs.to_json_value` can serialize it. When a
family names a pydantic model for a kind, plain mappings passed for that kind
are validated against the model first.
"""

from __future__ import annotations

from typing import (Any, ClassVar, Dict, Generic, List, Mapping, Optional,
                    Protocol, Type, TypeVar, runtime_checkable)

from pydantic import BaseModel, ValidationError

from .chain.types import Coin, TxOutcome
from .errors import SerializationError

InitT = TypeVar("InitT")
ExecT = TypeVar("ExecT")
QueryT = TypeVar("QueryT")
MigrateT = TypeVar("MigrateT")

KINDS = ("init", "execute", "query", "migrate")


class ContractInterface(Generic[InitT, ExecT, QueryT, MigrateT]):
    init_msg: ClassVar[Optional[Type[Any]]] = None
    execute_msg: ClassVar[Optional[Type[Any]]] = None
    query_msg: ClassVar[Optional[Type[Any]]] = None
    migrate_msg: ClassVar[Optional[Type[Any]]] = None

    @classmethod
    def message_types(cls) -> Dict[str, Optional[Type[Any]]]:
        return {
            "init": cls.init_msg,
            "execute": cls.execute_msg,
            "query": cls.query_msg,
            "migrate": cls.migrate_msg,
        }

    @classmethod
    def coerce(cls, kind: str, payload: Any) -> Any:
        """Validate a raw mapping against the declared pydantic model for `kind`."""
        if kind not in KINDS:
            raise ValueError(f"unknown message kind {kind!r}")
        model = cls.message_types()[kind]
        if (
            model is None
            or not isinstance(model, type)
            or not issubclass(model, BaseModel)
            or isinstance(payload, BaseModel)
            or not isinstance(payload, Mapping)
        ):
            return payload
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise SerializationError(
                f"{kind} payload does not match {model.__name__}: {e.error_count()} error(s)",
                data={"errors": e.errors(include_url=False)},
            ) from e


class JsonContract(ContractInterface[Any, Any, Any, Any]):
    """Family for contracts driven with plain JSON payloads."""


@runtime_checkable
class ContractAPI(Protocol[InitT, ExecT, QueryT, MigrateT]):
    async def upload(self, name: Optional[str] = None, path: Optional[str] = None) -> TxOutcome: ...

    async def instantiate(
        self, init_msg: InitT, admin: Optional[str] = None, coins: Optional[List[Coin]] = None
    ) -> TxOutcome: ...

    async def execute(self, exec_msg: ExecT, coins: Optional[List[Coin]] = None) -> TxOutcome: ...

    async def query(self, query_msg: QueryT) -> Any: ...

    async def migrate(self, migrate_msg: MigrateT, new_code_id: Optional[int] = None) -> TxOutcome: ...


__all__ = ["ContractInterface", "JsonContract", "ContractAPI", "KINDS"]
