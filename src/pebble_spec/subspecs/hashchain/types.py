"""Base types for pebbled hash-chain traversal."""

from ...types.byte_arrays import BaseBytes
from .constants import CHAIN_VALUE_LENGTH


class ChainValue(BaseBytes):
    """
    A single element of a hash chain.

    Seeds, intermediate elements and the public commitment all share this type.
    """

    LENGTH = CHAIN_VALUE_LENGTH
