"""
Defines the constants and configuration presets for pebbled hash-chain traversal.

A production preset and a lightweight test preset are provided. The active
preset, `TARGET_CONFIG`, follows the `PEBBLE_ENV` environment flag.
"""

import hashlib

from pydantic import BaseModel, ConfigDict, model_validator
from typing_extensions import Final

from pebble_spec.config import PEBBLE_ENV

CHAIN_VALUE_LENGTH: Final = 32
"""The length in bytes of every chain element, seed and commitment."""


class ChainConfig(BaseModel):
    """A model holding the configuration constants for a hash-chain preset."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    HASH_NAME: str
    """
    The `hashlib` algorithm used as the one-way function.

    Its digest must be exactly `CHAIN_VALUE_LENGTH` bytes.
    """

    LOG_MAX_CHAIN_LENGTH: int
    """The base-2 logarithm of the longest chain this preset accepts."""

    @property
    def MAX_CHAIN_LENGTH(self) -> int:  # noqa: N802
        """The longest chain this preset accepts."""
        return 1 << self.LOG_MAX_CHAIN_LENGTH

    @model_validator(mode="after")
    def check_digest_length(self) -> "ChainConfig":
        """Reject algorithms that are unavailable or have the wrong output size."""
        try:
            digest_size = hashlib.new(self.HASH_NAME).digest_size
        except ValueError as e:
            raise ValueError(f"Unsupported hash algorithm: {self.HASH_NAME!r}") from e
        if digest_size != CHAIN_VALUE_LENGTH:
            raise ValueError(
                f"{self.HASH_NAME} produces {digest_size}-byte digests, "
                f"expected {CHAIN_VALUE_LENGTH}"
            )
        if not 1 <= self.LOG_MAX_CHAIN_LENGTH < PEBBLE_LIST_LIMIT:
            raise ValueError(
                f"LOG_MAX_CHAIN_LENGTH must be in [1, {PEBBLE_LIST_LIMIT}), "
                f"got {self.LOG_MAX_CHAIN_LENGTH}"
            )
        return self


HASHES_PER_ROUND: Final = 2
"""
How many one-way applications a travelling pebble receives per round.

A level-`i` pebble travels `2^(i+1)` positions, so it ripens after `2^i` rounds.
"""

PEBBLE_LIST_LIMIT: Final = 64
"""Upper bound on the number of pebbles a persisted state may carry."""

CHAIN_STEP_DOMAIN_SEP: Final = bytes([0x00])
"""Prefix of every chain step `x(k+1) = H(0x00 || x(k))`."""

SEED_DOMAIN_SEP: Final = bytes([0x01])
"""Prefix used when deriving a seed from arbitrary material."""


PROD_CONFIG: Final = ChainConfig(
    HASH_NAME="sha256",
    LOG_MAX_CHAIN_LENGTH=32,
)


TEST_CONFIG: Final = ChainConfig(
    HASH_NAME="blake2s",
    LOG_MAX_CHAIN_LENGTH=12,
)


TARGET_CONFIG: Final = TEST_CONFIG if PEBBLE_ENV == "test" else PROD_CONFIG
"""The preset selected by `PEBBLE_ENV`."""
