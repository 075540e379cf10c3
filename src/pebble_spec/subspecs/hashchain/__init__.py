"""
This package implements pebbled hash-chain traversal.

A hash chain is released backwards, one element per round, while storing
only `log2(n)` checkpoints and doing `O(log n)` hashes per round.

It exposes the core data structures and the main interface functions.
"""

from .chain import ChainFunction
from .constants import PROD_CONFIG, TARGET_CONFIG, TEST_CONFIG, ChainConfig
from .exceptions import CorruptState, ExhaustedChain, HashChainError, InvalidChainLength
from .interface import PROD_SCHEME, TARGET_SCHEME, TEST_SCHEME, HashChainScheme
from .pebble import Pebble, PebbleList
from .pebble_set import PebbleSet
from .traversal import HashChainTraversal, TraversalState
from .types import ChainValue

__all__ = [
    "HashChainScheme",
    "HashChainTraversal",
    "ChainFunction",
    "ChainConfig",
    "ChainValue",
    "Pebble",
    "PebbleList",
    "PebbleSet",
    "TraversalState",
    "HashChainError",
    "InvalidChainLength",
    "ExhaustedChain",
    "CorruptState",
    "PROD_CONFIG",
    "TEST_CONFIG",
    "TARGET_CONFIG",
    "PROD_SCHEME",
    "TEST_SCHEME",
    "TARGET_SCHEME",
]
