"""Reusable type definitions for pebbled hash-chain traversal."""

from .base import CamelModel, StrictBaseModel
from .byte_arrays import BaseBytes
from .collections import SSZList
from .container import Container
from .exceptions import (
    SSZDecodeError,
    SSZError,
    SSZSerializationError,
    SSZTypeError,
    SSZValueError,
)
from .ssz_base import SSZType
from .uint import BaseUint, Uint32, Uint64

__all__ = [
    # Core types
    "Uint32",
    "Uint64",
    "BaseUint",
    "BaseBytes",
    "CamelModel",
    "StrictBaseModel",
    "SSZList",
    "SSZType",
    "Container",
    # Exceptions
    "SSZError",
    "SSZTypeError",
    "SSZValueError",
    "SSZSerializationError",
    "SSZDecodeError",
]
