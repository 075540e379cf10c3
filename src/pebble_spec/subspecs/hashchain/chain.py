"""
Defines the one-way chain function.

The chain is `x0 = seed`, `x(k+1) = H(0x00 || x(k))`, `xn = commitment`.
`H` is a `hashlib` algorithm named by the configuration preset. The leading
byte separates chain steps from seed derivation, which uses `0x01`.
"""

from __future__ import annotations

import hashlib

from pydantic import model_validator

from pebble_spec.types import StrictBaseModel

from .constants import (
    CHAIN_STEP_DOMAIN_SEP,
    CHAIN_VALUE_LENGTH,
    PROD_CONFIG,
    SEED_DOMAIN_SEP,
    TEST_CONFIG,
    ChainConfig,
)
from .schedule import chain_levels
from .types import ChainValue


class ChainFunction(StrictBaseModel):
    """An instance of the one-way chain function for a given config."""

    config: ChainConfig
    """Configuration parameters for the chain function."""

    @model_validator(mode="after")
    def enforce_strict_types(self) -> "ChainFunction":
        """Reject subclasses to prevent type confusion attacks."""
        if type(self.config) is not ChainConfig:
            raise TypeError("config must be exactly ChainConfig, not a subclass")
        return self

    def apply_once(self, value: bytes) -> ChainValue:
        """Advance a chain element by one position."""
        digest = hashlib.new(self.config.HASH_NAME, CHAIN_STEP_DOMAIN_SEP + bytes(value)).digest()
        return ChainValue(digest)

    def apply_times(self, value: bytes, num_steps: int) -> ChainValue:
        """
        Advance a chain element by `num_steps` positions.

        Equivalent to `num_steps` sequential calls to `apply_once`; zero steps
        returns the value unchanged.

        Raises:
            ValueError: If `num_steps` is negative.
        """
        if num_steps < 0:
            raise ValueError(f"Cannot walk a chain backwards ({num_steps} steps)")
        current = ChainValue(value)
        for _ in range(num_steps):
            current = self.apply_once(current)
        return current

    def commitment(self, seed: bytes, chain_length: int) -> ChainValue:
        """
        Compute the public anchor `xn` of a chain.

        Raises:
            InvalidChainLength: If the length cannot be traversed under this preset.
        """
        chain_levels(chain_length, self.config.MAX_CHAIN_LENGTH)
        return self.apply_times(seed, chain_length)

    def verify(self, value: bytes, round_number: int, commitment: bytes) -> bool:
        """
        Check a value released in `round_number` against the commitment.

        The value released in round `r` sits `r` applications below the commitment.
        A value of the wrong length is never a chain element and is rejected.
        """
        if round_number < 1 or len(value) != CHAIN_VALUE_LENGTH:
            return False
        return self.apply_times(value, round_number) == commitment

    def derive_seed(self, material: bytes) -> ChainValue:
        """
        Map arbitrary secret material into the chain value domain.

        The material should carry at least `CHAIN_VALUE_LENGTH` bytes of entropy.
        """
        digest = hashlib.new(self.config.HASH_NAME, SEED_DOMAIN_SEP + material).digest()
        return ChainValue(digest)

    def full_chain(self, seed: bytes, chain_length: int) -> list[ChainValue]:
        """
        Materialize the whole chain `[x0, ..., xn]`.

        Warning: stores every element, `chain_length + 1` values in total.
        Intended as a reference for tests and debugging, never for traversal.
        """
        chain_levels(chain_length, self.config.MAX_CHAIN_LENGTH)
        values = [ChainValue(seed)]
        for _ in range(chain_length):
            values.append(self.apply_once(values[-1]))
        return values


PROD_CHAIN = ChainFunction(config=PROD_CONFIG)
"""An instance configured for production-level parameters."""

TEST_CHAIN = ChainFunction(config=TEST_CONFIG)
"""A lightweight instance for test environments."""
