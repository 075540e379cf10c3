"""Bounded SSZ list of fixed-size elements."""

from __future__ import annotations

from typing import IO, Any, ClassVar, Generic, Iterator, Sequence, Type, TypeVar

from pydantic import Field, field_validator
from typing_extensions import Self

from .base import StrictBaseModel
from .exceptions import SSZDecodeError, SSZTypeError, SSZValueError
from .ssz_base import SSZType

T = TypeVar("T", bound=SSZType)
"""Element type of an `SSZList`."""


class SSZList(StrictBaseModel, SSZType, Generic[T]):
    """
    Up to `LIMIT` elements of the fixed-size type `ELEMENT_TYPE`.

    Elements are encoded back-to-back, so the element count follows from the
    scope when decoding. Subclasses bind both class variables, e.g.
    `List[Pebble, PEBBLE_LIST_LIMIT]`.
    """

    ELEMENT_TYPE: ClassVar[Type[SSZType]]
    """Type of every element; must be fixed-size."""

    LIMIT: ClassVar[int]
    """Largest number of elements allowed."""

    data: Sequence[T] = Field(default_factory=tuple)
    """The elements, stored as a tuple."""

    @field_validator("data", mode="before")
    @classmethod
    def _check_elements(cls, value: Any) -> tuple[SSZType, ...]:
        """Require instances of `ELEMENT_TYPE` and respect `LIMIT`."""
        if not cls.ELEMENT_TYPE.is_fixed_size():
            raise SSZTypeError(f"{cls.__name__}: element type must be fixed-size")
        if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
            raise SSZTypeError(f"Expected iterable, got {type(value).__name__}")

        elements = tuple(value)
        if len(elements) > cls.LIMIT:
            raise SSZValueError(f"{cls.__name__} exceeds limit of {cls.LIMIT}, got {len(elements)}")
        for element in elements:
            if not isinstance(element, cls.ELEMENT_TYPE):
                raise SSZTypeError(
                    f"Expected {cls.ELEMENT_TYPE.__name__}, got {type(element).__name__}"
                )
        return elements

    @classmethod
    def is_fixed_size(cls) -> bool:
        """The element count varies, so the encoded width does too."""
        return False

    @classmethod
    def get_byte_length(cls) -> int:
        """Never available for a list."""
        raise SSZTypeError(f"{cls.__name__}: variable-size list has no fixed byte length")

    def serialize(self, stream: IO[bytes]) -> int:
        """Write the elements back-to-back."""
        return sum(element.serialize(stream) for element in self.data)

    @classmethod
    def deserialize(cls, stream: IO[bytes], scope: int) -> Self:
        """
        Read `scope // element_size` elements.

        Raises:
            SSZDecodeError: If `scope` is not a whole number of elements.
            SSZValueError: If there are more than `LIMIT` elements.
        """
        element_size = cls.ELEMENT_TYPE.get_byte_length()
        count, leftover = divmod(scope, element_size)
        if leftover:
            raise SSZDecodeError(
                cls.__name__, f"scope {scope} not divisible by element size {element_size}"
            )
        if count > cls.LIMIT:
            raise SSZValueError(f"{cls.__name__} exceeds limit of {cls.LIMIT}, got {count}")
        return cls(data=[cls.ELEMENT_TYPE.deserialize(stream, element_size) for _ in range(count)])

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self) -> Iterator[T]:  # type: ignore[override]
        return iter(self.data)
