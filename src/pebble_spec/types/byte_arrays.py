"""
Byte strings of a length fixed by their type.

Chain values are the only such type the traversal needs, but the length is
a class variable so tests can build short variants.
"""

from __future__ import annotations

from typing import IO, Any, ClassVar, Iterable

from pydantic.annotated_handlers import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self

from .exceptions import SSZDecodeError
from .ssz_base import SSZType


def _as_bytes(value: Any) -> bytes:
    """
    Read `value` as raw bytes.

    Hex text (with or without `0x`) is decoded, byte-like objects are copied
    and any other iterable must yield integers in `[0, 256)`.
    """
    if isinstance(value, str):
        return bytes.fromhex(value.removeprefix("0x"))
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, Iterable):
        return bytes(list(value))
    raise TypeError(f"Cannot read {type(value).__name__} as bytes")


class BaseBytes(bytes, SSZType):
    """`bytes` holding exactly `LENGTH` octets; encoded as the octets themselves."""

    LENGTH: ClassVar[int]
    """Required length, set by each subclass."""

    def __new__(cls, value: Any) -> Self:
        """
        Build an instance from bytes, hex text or an iterable of octets.

        Raises:
            ValueError: If the input does not hold exactly `LENGTH` bytes.
        """
        raw = _as_bytes(value)
        if len(raw) != cls.LENGTH:
            raise ValueError(f"{cls.__name__} expects exactly {cls.LENGTH} bytes, got {len(raw)}")
        return super().__new__(cls, raw)

    @classmethod
    def is_fixed_size(cls) -> bool:
        return True

    @classmethod
    def get_byte_length(cls) -> int:
        return cls.LENGTH

    def serialize(self, stream: IO[bytes]) -> int:
        return stream.write(self)

    @classmethod
    def deserialize(cls, stream: IO[bytes], scope: int) -> Self:
        """
        Read `LENGTH` bytes.

        Raises:
            SSZDecodeError: If `scope` differs from `LENGTH` or the stream is short.
        """
        if scope != cls.LENGTH:
            raise SSZDecodeError(cls.__name__, f"expected {cls.LENGTH} bytes, got scope {scope}")
        raw = stream.read(scope)
        if len(raw) != scope:
            raise SSZDecodeError(cls.__name__, "stream ended prematurely")
        return cls(raw)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Take instances as they are or raw `bytes` of the right length; dump as hex."""
        from_raw = core_schema.chain_schema(
            [
                core_schema.bytes_schema(min_length=cls.LENGTH, max_length=cls.LENGTH),
                core_schema.no_info_plain_validator_function(cls),
            ]
        )
        return core_schema.union_schema(
            [core_schema.is_instance_schema(cls), from_raw],
            serialization=core_schema.plain_serializer_function_ser_schema(bytes.hex),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.hex()})"
