"""
Stateful backwards traversal of a hash chain.

A `HashChainTraversal` owns a pebble set and a round counter. Each call to
`next_output` releases the next chain element, from `x(n-1)` down to `x0`,
while keeping at most `log2(n)` stored values and doing `O(log n)` hashes.
"""

from __future__ import annotations

import logging
from typing import Iterator

from ...types import Container, SSZError, Uint64
from .chain import ChainFunction
from .exceptions import CorruptState, ExhaustedChain, InvalidChainLength
from .pebble import PebbleList
from .pebble_set import PebbleSet
from .schedule import chain_levels
from .types import ChainValue

logger = logging.getLogger(__name__)


class TraversalState(Container):
    """
    The persisted form of a traversal.

    SSZ Container with fields:
    - chain_length: uint64
    - round: uint64
    - pebbles: List[Pebble, PEBBLE_LIST_LIMIT]
    """

    chain_length: Uint64
    """Number of one-way applications between seed and commitment."""

    round: Uint64
    """Number of outputs already released."""

    pebbles: PebbleList
    """Surviving pebbles, highest target first."""


class HashChainTraversal:
    """Releases the elements of one hash chain in reverse order."""

    def __init__(self, chain: ChainFunction, pebble_set: PebbleSet, round_number: int = 0):
        """Wrap a pebble set; use `initialize`, `from_state` or `from_bytes` instead."""
        self.chain = chain
        self._pebble_set = pebble_set
        self._round = round_number

    @classmethod
    def initialize(cls, chain: ChainFunction, seed: bytes, chain_length: int) -> HashChainTraversal:
        """
        Start a fresh traversal of the chain rooted at `seed`.

        Raises:
            InvalidChainLength: If `chain_length` is not a power of two >= 2
                or exceeds the preset's maximum.
        """
        levels = chain_levels(chain_length, chain.config.MAX_CHAIN_LENGTH)
        pebble_set = PebbleSet.initialize(chain, ChainValue(seed), chain_length)
        logger.info(
            "Initialized traversal of a %d-element chain with %d pebbles", chain_length, levels
        )
        return cls(chain, pebble_set)

    @classmethod
    def from_state(cls, chain: ChainFunction, state: TraversalState) -> HashChainTraversal:
        """
        Resume a traversal from its persisted state.

        Raises:
            CorruptState: If the state is inconsistent with the placement schedule.
        """
        chain_length = int(state.chain_length)
        try:
            chain_levels(chain_length, chain.config.MAX_CHAIN_LENGTH)
            pebble_set = PebbleSet.restore(
                chain, chain_length, int(state.round), list(state.pebbles)
            )
        except InvalidChainLength as e:
            logger.warning("Rejected persisted traversal state: %s", e)
            raise CorruptState(f"invalid chain length ({e.message})") from e
        except CorruptState as e:
            logger.warning("Rejected persisted traversal state: %s", e)
            raise

        logger.debug(
            "Resumed traversal at round %d of %d with %d pebbles",
            int(state.round),
            chain_length,
            len(pebble_set),
        )
        return cls(chain, pebble_set, int(state.round))

    @classmethod
    def from_bytes(cls, chain: ChainFunction, data: bytes) -> HashChainTraversal:
        """
        Resume a traversal from its SSZ encoding.

        Raises:
            CorruptState: If the bytes do not decode or the state is inconsistent.
        """
        try:
            state = TraversalState.decode_bytes(data)
        except (SSZError, ValueError, OverflowError, TypeError) as e:
            logger.warning("Could not decode persisted traversal state: %s", e)
            raise CorruptState(f"undecodable state ({e})") from e
        return cls.from_state(chain, state)

    @property
    def chain_length(self) -> int:
        """Number of elements the traversal releases in total."""
        return self._pebble_set.chain_length

    @property
    def round(self) -> int:
        """Number of elements released so far."""
        return self._round

    @property
    def remaining(self) -> int:
        """Number of elements still to be released."""
        return self.chain_length - self._round

    @property
    def is_exhausted(self) -> bool:
        """Whether every element has been released."""
        return self._round >= self.chain_length

    @property
    def pebble_count(self) -> int:
        """Number of chain values currently stored."""
        return len(self._pebble_set)

    def next_output(self) -> ChainValue:
        """
        Release the next chain element.

        Round `r` returns `x(n - r)`: the first call yields `x(n-1)`, the last `x0`.

        Raises:
            ExhaustedChain: If all `n` elements have already been released.
            CorruptState: If the pebbles cannot serve the round.
        """
        if self.is_exhausted:
            raise ExhaustedChain(self.chain_length)

        round_number = self._round + 1
        value = self._pebble_set.advance_one_round(round_number)
        self._round = round_number

        if self.is_exhausted:
            logger.info("Released the last element of a %d-element chain", self.chain_length)
        return value

    def __iter__(self) -> Iterator[ChainValue]:
        """Yield every remaining element in release order."""
        while not self.is_exhausted:
            yield self.next_output()

    @property
    def state(self) -> TraversalState:
        """Snapshot of the traversal as a persistable container."""
        return TraversalState(
            chain_length=Uint64(self.chain_length),
            round=Uint64(self._round),
            pebbles=PebbleList(data=self._pebble_set.pebbles),
        )

    def to_bytes(self) -> bytes:
        """SSZ-encode the current state."""
        return self.state.encode_bytes()
