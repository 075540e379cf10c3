"""
Placement arithmetic for fractal hash-chain traversal.

### Rounds and positions

A chain `x0 .. xn` is released backwards: round `r` (1-indexed) releases
`x(n - r)`. Because the one-way function only moves *up* the chain, every
value must be derived from a stored value at a lower position.

### Levels

The pebble of level `i` is responsible for the rounds whose lowest set bit is
`i + 1`, i.e. the rounds `d ≡ 2^(i+1) (mod 2^(i+2))`:

    level 0: rounds 2, 6, 10, 14, ...
    level 1: rounds 4, 12, 20, ...
    level 2: rounds 8, 24, ...

Every even round belongs to exactly one level. An odd round `r` is served by
the pebble of round `r + 1`, which sits one position below and costs a single
extra application.

### Relocation

After level `i` is consumed at round `d`, its next round is
`d' = d + 2^(i+2)`. The pebble is re-seeded from the ripe pebble sitting
`2^(i+1)` positions below the new target (round `d + 3·2^(i+1)`, which is
always owned by a higher level and already in place), then travels upwards at
`HASHES_PER_ROUND` applications per round. It ripens after `2^i` rounds, well
before round `d'`.

Everything here is a pure function of `(level, round, n)`, so a persisted state
can be checked against it without replaying any hashes.
"""

from __future__ import annotations

from dataclasses import dataclass

from .constants import HASHES_PER_ROUND
from .exceptions import InvalidChainLength


@dataclass(frozen=True, slots=True)
class PebbleSlot:
    """Where a level's pebble must be between two rounds."""

    target_position: int
    """Chain index the pebble is heading for."""

    steps_remaining: int
    """Applications still needed before the pebble is ripe."""

    @property
    def source_position(self) -> int:
        """Chain index of the value the pebble currently holds."""
        return self.target_position - self.steps_remaining


def chain_levels(chain_length: int, max_length: int | None = None) -> int:
    """
    Validate a chain length and return its number of pebble levels, `log2(n)`.

    Args:
        chain_length: Number of one-way applications between seed and commitment.
        max_length: Optional upper bound imposed by a configuration preset.

    Raises:
        TypeError: If `chain_length` is not an integer.
        InvalidChainLength: If it is not a power of two >= 2 or exceeds `max_length`.
    """
    if isinstance(chain_length, bool) or not isinstance(chain_length, int):
        raise TypeError(f"Chain length must be an int, got {type(chain_length).__name__}")
    if chain_length < 2 or chain_length & (chain_length - 1):
        raise InvalidChainLength(chain_length)
    if max_length is not None and chain_length > max_length:
        raise InvalidChainLength(chain_length, max_length=max_length)
    return chain_length.bit_length() - 1


def required_output_position(round_number: int, chain_length: int) -> int:
    """
    The chain index released in a given round.

    Raises:
        ValueError: If `round_number` is outside `[1, chain_length]`.
    """
    if not 1 <= round_number <= chain_length:
        raise ValueError(f"Round {round_number} is outside [1, {chain_length}]")
    return chain_length - round_number


def serving_level(round_number: int) -> int:
    """The level whose pebble serves a round (odd rounds borrow from the next round)."""
    if round_number < 1:
        raise ValueError(f"Rounds start at 1, got {round_number}")
    even_round = round_number + (round_number & 1)
    return (even_round & -even_round).bit_length() - 2


def travel_distance(level: int) -> int:
    """Positions a re-seeded pebble travels before it is ripe."""
    return 1 << (level + 1)


def level_period(level: int) -> int:
    """Rounds between two consecutive consumptions of the same level."""
    return 1 << (level + 2)


def next_due_round(level: int, completed_rounds: int) -> int:
    """The first round after `completed_rounds` at which `level` is consumed."""
    first = 1 << (level + 1)
    if completed_rounds < first:
        return first
    period = level_period(level)
    return first + period * ((completed_rounds - first) // period + 1)


def pebble_slot(level: int, completed_rounds: int, chain_length: int) -> PebbleSlot | None:
    """
    Where the pebble of `level` must be once `completed_rounds` rounds are done.

    Returns:
        The slot, or `None` when the level is retired because its next round
        lies beyond the end of the chain.
    """
    due = next_due_round(level, completed_rounds)
    if due > chain_length:
        return None

    # Pebbles placed at setup have no previous round and start out ripe.
    if due == 1 << (level + 1):
        return PebbleSlot(target_position=chain_length - due, steps_remaining=0)

    # Otherwise it left its previous slot at the end of round `due - period`.
    departed = due - level_period(level)
    travelled = HASHES_PER_ROUND * (completed_rounds - departed)
    steps = max(0, travel_distance(level) - travelled)
    return PebbleSlot(target_position=chain_length - due, steps_remaining=steps)
