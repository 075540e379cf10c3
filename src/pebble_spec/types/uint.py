"""Unsigned integer SSZ types."""

from __future__ import annotations

from typing import IO, Any, ClassVar, SupportsInt

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self

from .exceptions import SSZDecodeError
from .ssz_base import SSZType


class BaseUint(int, SSZType):
    """
    An `int` restricted to `[0, 2**BITS)`, encoded as `BITS // 8` little-endian bytes.

    Only construction is checked; arithmetic returns plain `int`.
    """

    BITS: ClassVar[int]
    """Width of the integer in bits."""

    def __new__(cls, value: SupportsInt) -> Self:
        """
        Create a range-checked instance.

        Raises:
            OverflowError: If `value` does not fit in `BITS` unsigned bits.
        """
        number = int(value)
        if number < 0 or number >> cls.BITS:
            raise OverflowError(f"{number} is out of range for {cls.__name__}")
        return super().__new__(cls, number)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Accept genuine integers only (no bools, floats or strings); dump as `int`."""

        def validate(value: Any) -> BaseUint:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Expected int for {cls.__name__}, got {type(value).__name__}")
            try:
                return cls(value)
            except OverflowError as e:
                raise ValueError(str(e)) from e

        return core_schema.no_info_plain_validator_function(
            validate,
            serialization=core_schema.plain_serializer_function_ser_schema(int),
        )

    @classmethod
    def is_fixed_size(cls) -> bool:
        return True

    @classmethod
    def get_byte_length(cls) -> int:
        return cls.BITS // 8

    def serialize(self, stream: IO[bytes]) -> int:
        """Write the little-endian encoding."""
        return stream.write(int(self).to_bytes(self.get_byte_length(), "little"))

    @classmethod
    def deserialize(cls, stream: IO[bytes], scope: int) -> Self:
        """
        Read one integer of exactly the type width.

        Raises:
            SSZDecodeError: If `scope` is not the type width or the stream ends early.
        """
        width = cls.get_byte_length()
        if scope != width:
            raise SSZDecodeError(cls.__name__, f"expected {width} bytes, got scope {scope}")
        data = stream.read(width)
        if len(data) != width:
            raise SSZDecodeError(cls.__name__, "stream ended prematurely")
        return cls(int.from_bytes(data, "little"))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({int(self)})"

    def __str__(self) -> str:
        return str(int(self))


class Uint32(BaseUint):
    """uint32, used for container offsets."""

    BITS = 32


class Uint64(BaseUint):
    """uint64, used for every counter and position of the traversal state."""

    BITS = 64
