"""Exception hierarchy for the SSZ type system."""

from __future__ import annotations


class SSZError(Exception):
    """
    Base exception for all SSZ-related errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class SSZTypeError(SSZError):
    """Raised when an SSZ type class is incorrectly defined or used."""


class SSZValueError(SSZError):
    """
    Raised when a value is invalid for an SSZ operation.

    The type may be correct while the value is not, e.g. a list over its limit.
    """


class SSZSerializationError(SSZError):
    """Base class for serialization-related errors."""


class SSZDecodeError(SSZSerializationError):
    """
    Raised when decoding SSZ bytes to a value fails.

    Attributes:
        type_name: The type being decoded.
        detail: Description of what went wrong.
        offset: The byte offset where the error occurred (if known).
    """

    def __init__(
        self,
        type_name: str,
        detail: str,
        *,
        offset: int | None = None,
    ) -> None:
        self.type_name = type_name
        self.detail = detail
        self.offset = offset

        msg = f"Failed to decode {type_name}: {detail}"
        if offset is not None:
            msg = f"{msg} (at byte offset {offset})"

        super().__init__(msg)
