"""The interface shared by every serializable type of the persisted state."""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from typing import IO

from typing_extensions import Self


class SSZType(ABC):
    """
    A type with a canonical SSZ byte encoding.

    Subclasses implement the stream-based `serialize` / `deserialize` pair and
    report whether their encoded width is known up front. The byte-string
    helpers are derived from those.
    """

    @classmethod
    @abstractmethod
    def is_fixed_size(cls) -> bool:
        """Whether every instance encodes to the same number of bytes."""

    @classmethod
    @abstractmethod
    def get_byte_length(cls) -> int:
        """
        The encoded width of a fixed-size type.

        Raises:
            TypeError or SSZTypeError: For variable-size types.
        """

    @abstractmethod
    def serialize(self, stream: IO[bytes]) -> int:
        """Write the encoding to `stream` and return the number of bytes written."""

    @classmethod
    @abstractmethod
    def deserialize(cls, stream: IO[bytes], scope: int) -> Self:
        """Read an instance that occupies exactly `scope` bytes of `stream`."""

    def encode_bytes(self) -> bytes:
        """Encode to a standalone byte string."""
        with io.BytesIO() as stream:
            self.serialize(stream)
            return stream.getvalue()

    @classmethod
    def decode_bytes(cls, data: bytes) -> Self:
        """Decode a standalone byte string."""
        with io.BytesIO(data) as stream:
            return cls.deserialize(stream, len(data))
