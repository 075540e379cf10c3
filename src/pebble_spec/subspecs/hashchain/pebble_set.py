"""
The pebble set: checkpoints that let a hash chain be released backwards.

One pebble per level, `log2(n)` at most. Each round the set:

1. advances every travelling pebble by `HASHES_PER_ROUND` applications,
2. releases the value due this round from its front pebble,
3. relocates the consumed level to its next slot (or retires it).

Construction of far-away checkpoints is thereby spread over the rounds
leading up to their use, so no round does more than `O(log n)` work.
"""

from __future__ import annotations

import bisect
import logging
from typing import Iterable, Sequence

from ...types import Uint64
from .chain import ChainFunction
from .constants import HASHES_PER_ROUND
from .exceptions import CorruptState
from .pebble import Pebble
from .schedule import chain_levels, pebble_slot, required_output_position, serving_level
from .types import ChainValue

logger = logging.getLogger(__name__)


def _front_key(pebble: Pebble) -> int:
    """Sort key placing the highest target first."""
    return -int(pebble.target_position)


class PebbleSet:
    """The in-progress and completed checkpoints of one traversal."""

    def __init__(self, chain: ChainFunction, chain_length: int, pebbles: Iterable[Pebble]):
        """Wrap already-validated pebbles; use `initialize` or `restore` instead."""
        self.chain = chain
        self.chain_length = chain_length
        self.levels = chain_levels(chain_length)
        self._pebbles: list[Pebble] = sorted(pebbles, key=_front_key)

    @classmethod
    def initialize(cls, chain: ChainFunction, seed: ChainValue, chain_length: int) -> PebbleSet:
        """
        Place one ripe pebble per level, computed in a single sweep from the seed.

        Level `i` starts at chain index `n - 2^(i+1)`; the top level holds the
        seed itself. The sweep costs `n - 2` applications, paid once.
        """
        levels = chain_levels(chain_length)

        # Walk up the chain once, dropping a pebble at each level's start.
        #
        # Lower chain indices belong to higher levels, so the sweep runs from
        # the top level down to level 0.
        pebbles: list[Pebble] = []
        value, position = seed, 0
        for level in reversed(range(levels)):
            slot = pebble_slot(level, 0, chain_length)
            assert slot is not None, "every level has a slot before the first round"

            value = chain.apply_times(value, slot.target_position - position)
            position = slot.target_position
            pebbles.append(
                Pebble(
                    level=Uint64(level),
                    target_position=Uint64(position),
                    current_value=value,
                    steps_remaining=Uint64(0),
                )
            )

        return cls(chain, chain_length, pebbles)

    @classmethod
    def restore(
        cls,
        chain: ChainFunction,
        chain_length: int,
        completed_rounds: int,
        pebbles: Sequence[Pebble],
    ) -> PebbleSet:
        """
        Rebuild a pebble set from persisted pebbles.

        Every level is checked against the schedule: it must be present exactly
        when it is not retired, with the target and remaining steps the schedule
        prescribes after `completed_rounds` rounds.

        Raises:
            CorruptState: If any check fails.
        """
        levels = chain_levels(chain_length)
        if completed_rounds > chain_length:
            raise CorruptState(f"round {completed_rounds} is past the chain length {chain_length}")

        by_level: dict[int, Pebble] = {}
        for pebble in pebbles:
            level = int(pebble.level)
            if level >= levels:
                raise CorruptState(f"no such level for a {chain_length}-element chain", level=level)
            if level in by_level:
                raise CorruptState("duplicate pebble", level=level)
            by_level[level] = pebble

        for level in range(levels):
            slot = pebble_slot(level, completed_rounds, chain_length)
            pebble = by_level.get(level)
            if slot is None:
                if pebble is not None:
                    raise CorruptState("retired level still holds a pebble", level=level)
                continue
            if pebble is None:
                raise CorruptState("missing pebble", level=level)
            if int(pebble.target_position) != slot.target_position:
                raise CorruptState(
                    f"target {int(pebble.target_position)} should be {slot.target_position}",
                    level=level,
                )
            if int(pebble.steps_remaining) != slot.steps_remaining:
                raise CorruptState(
                    f"{int(pebble.steps_remaining)} steps remaining, "
                    f"should be {slot.steps_remaining}",
                    level=level,
                )

        targets = [int(pebble.target_position) for pebble in pebbles]
        if targets != sorted(targets, reverse=True):
            raise CorruptState("pebbles are not ordered by target position")

        return cls(chain, chain_length, pebbles)

    @property
    def pebbles(self) -> tuple[Pebble, ...]:
        """Snapshot of the pebbles, highest target first."""
        return tuple(self._pebbles)

    def __len__(self) -> int:
        return len(self._pebbles)

    def advance_one_round(self, round_number: int) -> ChainValue:
        """
        Run round `round_number` and return the value it releases, `x(n - round)`.

        Raises:
            CorruptState: If no ripe pebble can serve the round.
        """
        hashes = 0

        # Move every travelling pebble closer to its target.
        for index, pebble in enumerate(self._pebbles):
            steps = int(pebble.steps_remaining)
            if steps == 0:
                continue
            moves = min(HASHES_PER_ROUND, steps)
            self._pebbles[index] = pebble.model_copy(
                update={
                    "current_value": self.chain.apply_times(pebble.current_value, moves),
                    "steps_remaining": Uint64(steps - moves),
                }
            )
            hashes += moves

        # The front pebble is due this round (even rounds) or next round (odd rounds).
        required = required_output_position(round_number, self.chain_length)
        front = self._pebbles[0] if self._pebbles else None
        if front is None or not front.is_ripe:
            raise CorruptState(f"no ripe pebble available for round {round_number}")
        if int(front.level) != serving_level(round_number):
            raise CorruptState(
                f"round {round_number} reached the wrong front pebble", level=int(front.level)
            )

        target = int(front.target_position)
        if target == required:
            value = front.current_value
            self._relocate(round_number)
        elif target == required - 1:
            value = self.chain.apply_once(front.current_value)
            hashes += 1
        else:
            raise CorruptState(
                f"front pebble targets {target} but round {round_number} needs {required}",
                level=int(front.level),
            )

        logger.debug(
            "Round %d released position %d with %d hashes (%d pebbles)",
            round_number,
            required,
            hashes,
            len(self._pebbles),
        )
        return value

    def _relocate(self, round_number: int) -> None:
        """Move the consumed front pebble to its level's next slot, or retire it."""
        consumed = self._pebbles.pop(0)
        level = int(consumed.level)

        slot = pebble_slot(level, round_number, self.chain_length)
        if slot is None:
            logger.debug("Level %d retired after round %d", level, round_number)
            return

        # The new slot starts where a higher level's ripe pebble already sits.
        source = next(
            (
                pebble
                for pebble in self._pebbles
                if pebble.is_ripe and int(pebble.target_position) == slot.source_position
            ),
            None,
        )
        if source is None:
            raise CorruptState(
                f"no ripe pebble at position {slot.source_position} to re-seed from",
                level=level,
            )

        relocated = Pebble(
            level=consumed.level,
            target_position=Uint64(slot.target_position),
            current_value=source.current_value,
            steps_remaining=Uint64(slot.steps_remaining),
        )
        bisect.insort(self._pebbles, relocated, key=_front_key)
        logger.debug(
            "Level %d re-seeded at position %d, heading for %d",
            level,
            slot.source_position,
            slot.target_position,
        )
