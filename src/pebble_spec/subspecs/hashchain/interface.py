"""
Defines the core interface for pebbled hash-chain traversal.

Covers the high-level functions (`commitment`, `initialize`, `next_output`,
`verify`) and persistence of traversal state.

This constitutes the public API of the traversal.
"""

from __future__ import annotations

from .chain import PROD_CHAIN, TEST_CHAIN, ChainFunction
from .constants import PROD_CONFIG, TARGET_CONFIG, TEST_CONFIG, ChainConfig
from .traversal import HashChainTraversal
from .types import ChainValue


class HashChainScheme:
    """Instance of the pebbled traversal scheme for a given config."""

    def __init__(self, config: ChainConfig, chain: ChainFunction):
        """Initializes the scheme with a specific parameter set."""
        if chain.config != config:
            raise ValueError("chain function must be built for the same config")
        self.config = config
        self.chain = chain

    def commitment(self, seed: bytes, chain_length: int) -> ChainValue:
        """
        Computes the public commitment `xn` of the chain rooted at `seed`.

        This costs `chain_length` applications and is meant to be called once,
        when the commitment is published.

        Raises:
            InvalidChainLength: If `chain_length` is unsupported by this config.
        """
        return self.chain.commitment(seed, chain_length)

    def initialize(self, seed: bytes, chain_length: int) -> HashChainTraversal:
        """
        Starts the backwards traversal of the chain rooted at `seed`.

        ### Setup

        One pebble is placed per level, `log2(chain_length)` in total, by a
        single sweep up the chain. The top pebble keeps the seed itself, which
        is also the last value the traversal releases.

        Raises:
            InvalidChainLength: If `chain_length` is unsupported by this config.
        """
        return HashChainTraversal.initialize(self.chain, seed, chain_length)

    def next_output(self, traversal: HashChainTraversal) -> ChainValue:
        """
        Releases the next chain element, from `x(n-1)` down to `x0`.

        The traversal should be persisted (`dump`) before the value is handed
        out, so that a crash never replays or skips an element.

        Raises:
            ExhaustedChain: If every element has already been released.
        """
        return traversal.next_output()

    def verify(self, value: bytes, round_number: int, commitment: bytes) -> bool:
        """
        Verifies a value released in round `round_number`.

        ### Verification Algorithm

        Applies the one-way function `round_number` times to the value and
        compares the result with the commitment. Anything released in a
        non-positive round, or that is not a 32-byte value, is rejected outright.
        """
        return self.chain.verify(value, round_number, commitment)

    def dump(self, traversal: HashChainTraversal) -> bytes:
        """Serializes the traversal state to its SSZ encoding."""
        return traversal.to_bytes()

    def load(self, data: bytes) -> HashChainTraversal:
        """
        Restores a traversal from its SSZ encoding.

        Raises:
            CorruptState: If the bytes are undecodable or inconsistent.
        """
        return HashChainTraversal.from_bytes(self.chain, data)


PROD_SCHEME = HashChainScheme(PROD_CONFIG, PROD_CHAIN)
"""An instance configured for production-level parameters."""

TEST_SCHEME = HashChainScheme(TEST_CONFIG, TEST_CHAIN)
"""A lightweight instance for test environments."""

TARGET_SCHEME = TEST_SCHEME if TARGET_CONFIG is TEST_CONFIG else PROD_SCHEME
"""The scheme selected by `PEBBLE_ENV`."""
