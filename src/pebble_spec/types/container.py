"""
SSZ Container Type: ordered heterogeneous collections with named fields.

Containers are the structured records of the persisted traversal state.
Fields are serialized in definition order; variable-size fields are
replaced by offsets in the fixed part and appended afterwards.
"""

from __future__ import annotations

from typing import IO, Type, cast

from typing_extensions import Self

from .base import StrictBaseModel
from .constants import OFFSET_BYTE_LENGTH
from .exceptions import SSZDecodeError
from .ssz_base import SSZType
from .uint import Uint32


class Container(StrictBaseModel, SSZType):
    """
    SSZ Container: a strict, ordered collection of named fields.

    Example:
        >>> class Pebble(Container):
        ...     level: Uint64
        ...     target_position: Uint64
        ...     current_value: ChainValue
        ...     steps_remaining: Uint64

    Serialization format:
        [fixed_field_1][fixed_field_2]...[offset_1]...[variable_data_1]...
    """

    @classmethod
    def _field_types(cls) -> list[tuple[str, Type[SSZType]]]:
        """Return `(name, type)` pairs in definition order."""
        return [
            (name, cast(Type[SSZType], info.annotation)) for name, info in cls.model_fields.items()
        ]

    @classmethod
    def is_fixed_size(cls) -> bool:
        """A container is fixed-size only when all its fields are."""
        return all(field_type.is_fixed_size() for _, field_type in cls._field_types())

    @classmethod
    def get_byte_length(cls) -> int:
        """
        Calculate the exact byte length for fixed-size containers.

        Raises:
            TypeError: If called on a variable-size container.
        """
        if not cls.is_fixed_size():
            raise TypeError(f"{cls.__name__} is variable-size")
        return sum(field_type.get_byte_length() for _, field_type in cls._field_types())

    def serialize(self, stream: IO[bytes]) -> int:
        """
        Serialize the container following the SSZ two-part layout.

        Returns:
            Number of bytes written to the stream.
        """
        fixed_parts: list[bytes | None] = []
        variable_data: list[bytes] = []

        for field_name, field_type in self._field_types():
            value = cast(SSZType, getattr(self, field_name))
            if field_type.is_fixed_size():
                fixed_parts.append(value.encode_bytes())
            else:
                # Placeholder, later replaced by the offset of the variable data.
                fixed_parts.append(None)
                variable_data.append(value.encode_bytes())

        offset = sum(OFFSET_BYTE_LENGTH if part is None else len(part) for part in fixed_parts)

        var_index = 0
        for part in fixed_parts:
            if part is None:
                Uint32(offset).serialize(stream)
                offset += len(variable_data[var_index])
                var_index += 1
            else:
                stream.write(part)

        for data in variable_data:
            stream.write(data)

        return offset

    @classmethod
    def deserialize(cls, stream: IO[bytes], scope: int) -> Self:
        """
        Deserialize a container from a byte stream.

        Raises:
            SSZDecodeError: If the stream ends early or offsets are inconsistent.
        """
        fields: dict[str, SSZType] = {}
        var_fields: list[tuple[str, Type[SSZType], int]] = []
        bytes_read = 0

        # Fixed part: fixed-size fields and offsets of variable-size ones.
        for field_name, field_type in cls._field_types():
            if field_type.is_fixed_size():
                size = field_type.get_byte_length()
                data = stream.read(size)
                if len(data) != size:
                    raise SSZDecodeError(
                        cls.__name__, f"unexpected EOF reading {field_name}", offset=bytes_read
                    )
                fields[field_name] = field_type.decode_bytes(data)
                bytes_read += size
            else:
                offset_bytes = stream.read(OFFSET_BYTE_LENGTH)
                if len(offset_bytes) != OFFSET_BYTE_LENGTH:
                    raise SSZDecodeError(
                        cls.__name__,
                        f"unexpected EOF reading offset for {field_name}",
                        offset=bytes_read,
                    )
                var_fields.append((field_name, field_type, int(Uint32.decode_bytes(offset_bytes))))
                bytes_read += OFFSET_BYTE_LENGTH

        if not var_fields:
            if bytes_read != scope:
                raise SSZDecodeError(cls.__name__, f"expected {bytes_read} bytes, got {scope}")
            return cls(**fields)

        # Variable part: slice the remainder by the collected offsets.
        if var_fields[0][2] != bytes_read:
            raise SSZDecodeError(cls.__name__, f"first offset {var_fields[0][2]} != {bytes_read}")

        var_section = stream.read(scope - bytes_read)
        if len(var_section) != scope - bytes_read:
            raise SSZDecodeError(cls.__name__, "unexpected EOF in variable section")

        boundaries = [start for _, _, start in var_fields] + [scope]
        for i, (name, field_type, start) in enumerate(var_fields):
            end = boundaries[i + 1]
            if start > end or end > scope:
                raise SSZDecodeError(cls.__name__, f"invalid offsets for {name}")
            fields[name] = field_type.decode_bytes(
                var_section[start - bytes_read : end - bytes_read]
            )

        return cls(**fields)
