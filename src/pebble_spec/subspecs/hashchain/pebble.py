"""
Pebbles: stored checkpoints of a hash chain.

A pebble remembers one chain element and where it is heading. While
`steps_remaining > 0` it is travelling: it currently holds
`x(target_position - steps_remaining)` and each application of the one-way
function moves it one position closer to its target. Once
`steps_remaining == 0` the pebble is *ripe* and holds `x(target_position)`.
"""

from ...types import Container, SSZList, Uint64
from .constants import PEBBLE_LIST_LIMIT
from .types import ChainValue


class Pebble(Container):
    """
    A checkpoint owned by exactly one level of the pebble set.

    SSZ Container with fields:
    - level: uint64
    - target_position: uint64
    - current_value: ChainValue (32 bytes)
    - steps_remaining: uint64
    """

    level: Uint64
    """The level this pebble serves. Level `i` is consumed every `2^(i+2)` rounds."""

    target_position: Uint64
    """The chain index this pebble will hold once ripe."""

    current_value: ChainValue
    """The chain element currently held."""

    steps_remaining: Uint64
    """One-way applications still needed to reach `target_position`."""

    @property
    def is_ripe(self) -> bool:
        """Whether the pebble holds the exact value of its target position."""
        return int(self.steps_remaining) == 0

    @property
    def current_position(self) -> int:
        """The chain index of `current_value`."""
        return int(self.target_position) - int(self.steps_remaining)


class PebbleList(SSZList[Pebble]):
    """
    Ordered pebbles of a persisted traversal state.

    In SSZ notation: `List[Pebble, PEBBLE_LIST_LIMIT]`.
    Pebbles are stored by `target_position`, highest first.
    """

    ELEMENT_TYPE = Pebble
    LIMIT = PEBBLE_LIST_LIMIT
