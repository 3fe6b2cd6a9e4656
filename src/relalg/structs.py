from typing import Any, Self

import msgspec


class _Struct:
    __slots__ = ()

    @classmethod
    def from_bytes(cls, raw: bytes) -> Self:
        return msgspec.msgpack.decode(raw, type=cls)

    def encode(self) -> bytes:
        return msgspec.msgpack.encode(self)

    @classmethod
    def convert(cls, obj: Any) -> Self:
        return msgspec.convert(obj, type=cls)

    def to_dict(self) -> dict:
        return msgspec.to_builtins(self)


class FrozenStruct(msgspec.Struct, _Struct, frozen=True): ...
