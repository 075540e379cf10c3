"""
End-to-end tests for backwards hash-chain traversal.

Covers release order, verifiability against the commitment, the storage and
computation bounds, exhaustion, and persisting and resuming at every round.
"""

from __future__ import annotations

import logging

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from pebble_spec.subspecs.hashchain.chain import TEST_CHAIN
from pebble_spec.subspecs.hashchain.constants import TEST_CONFIG
from pebble_spec.subspecs.hashchain.exceptions import (
    CorruptState,
    ExhaustedChain,
    InvalidChainLength,
)
from pebble_spec.subspecs.hashchain.pebble import PebbleList
from pebble_spec.subspecs.hashchain.traversal import HashChainTraversal, TraversalState
from pebble_spec.subspecs.hashchain.types import ChainValue
from pebble_spec.types import Uint64

SEED = ChainValue(bytes(range(100, 132)))


def test_eight_element_example() -> None:
    """The commitment is `H^8(s)`, round 1 returns `H^7(s)` and round 8 returns `s`."""
    commitment = TEST_CHAIN.commitment(SEED, 8)
    assert commitment == TEST_CHAIN.apply_times(SEED, 8)

    traversal = HashChainTraversal.initialize(TEST_CHAIN, SEED, 8)
    outputs = list(traversal)

    assert outputs[0] == TEST_CHAIN.apply_times(SEED, 7)
    assert outputs[-1] == SEED
    assert outputs == list(reversed(TEST_CHAIN.full_chain(SEED, 8)[:8]))


def test_two_element_chain() -> None:
    """The shortest chain releases `x1` then `x0` with a single pebble."""
    traversal = HashChainTraversal.initialize(TEST_CHAIN, SEED, 2)
    assert traversal.pebble_count == 1
    assert traversal.next_output() == TEST_CHAIN.apply_once(SEED)
    assert traversal.next_output() == SEED
    assert traversal.is_exhausted


@settings(max_examples=25)
@given(st.integers(min_value=1, max_value=9), st.binary(min_size=32, max_size=32))
def test_order_and_verifiability(levels: int, seed: bytes) -> None:
    """Round `r` returns `x(n - r)`, which verifies against the commitment."""
    n = 1 << levels
    full = TEST_CHAIN.full_chain(seed, n)
    commitment = full[n]
    traversal = HashChainTraversal.initialize(TEST_CHAIN, seed, n)

    for round_number in range(1, n + 1):
        value = traversal.next_output()
        assert traversal.round == round_number
        assert value == full[n - round_number]
        assert TEST_CHAIN.verify(value, round_number, commitment)


@pytest.mark.parametrize("levels", [1, 2, 3, 5, 8])
def test_storage_bound(levels: int) -> None:
    """Exactly `log2 n` pebbles after setup, never more afterwards."""
    n = 1 << levels
    traversal = HashChainTraversal.initialize(TEST_CHAIN, SEED, n)
    assert traversal.pebble_count == levels

    counts = []
    while not traversal.is_exhausted:
        traversal.next_output()
        counts.append(traversal.pebble_count)

    assert max(counts) <= levels
    assert counts == sorted(counts, reverse=True)
    assert counts[-1] == 0


def test_levels_retire_as_their_last_round_passes() -> None:
    """The count drops below `log2 n` once a level has served its final round."""
    traversal = HashChainTraversal.initialize(TEST_CHAIN, SEED, 16)
    counts = []
    while not traversal.is_exhausted:
        counts.append(traversal.pebble_count)
        traversal.next_output()

    assert counts == [4] * 8 + [3] * 4 + [2] * 2 + [1] * 2


@pytest.mark.parametrize("levels", [1, 2, 4, 7, 10])
def test_computation_bound(levels: int, hash_counter) -> None:
    """At most `2 log2 n + 1` applications per round and `O(n log n)` overall."""
    n = 1 << levels
    traversal = HashChainTraversal.initialize(TEST_CHAIN, SEED, n)
    hash_counter.reset()

    total = 0
    for _ in range(n):
        traversal.next_output()
        spent = hash_counter.reset()
        assert spent <= 2 * levels + 1
        total += spent

    assert total <= n * levels


def test_exhaustion() -> None:
    """Call `n + 1` raises, and keeps raising."""
    traversal = HashChainTraversal.initialize(TEST_CHAIN, SEED, 4)
    for _ in range(4):
        traversal.next_output()

    assert traversal.remaining == 0
    with pytest.raises(ExhaustedChain, match="All 4 chain elements") as excinfo:
        traversal.next_output()
    assert excinfo.value.chain_length == 4
    with pytest.raises(ExhaustedChain):
        traversal.next_output()
    assert traversal.round == 4


def test_iteration_resumes_mid_chain() -> None:
    traversal = HashChainTraversal.initialize(TEST_CHAIN, SEED, 16)
    first = [traversal.next_output() for _ in range(5)]
    rest = list(traversal)
    assert len(first) + len(rest) == 16
    assert rest[-1] == SEED
    assert list(traversal) == []


@pytest.mark.parametrize("length", [0, 1, 3, 24])
def test_initialize_rejects_invalid_lengths(length: int) -> None:
    with pytest.raises(InvalidChainLength):
        HashChainTraversal.initialize(TEST_CHAIN, SEED, length)


def test_initialize_rejects_single_element_chain() -> None:
    with pytest.raises(InvalidChainLength, match="Chain length 1 is not supported") as excinfo:
        HashChainTraversal.initialize(TEST_CHAIN, SEED, 1)
    assert excinfo.value.chain_length == 1


def test_initialize_rejects_lengths_above_preset() -> None:
    with pytest.raises(InvalidChainLength, match="exceeds the maximum"):
        HashChainTraversal.initialize(TEST_CHAIN, SEED, TEST_CONFIG.MAX_CHAIN_LENGTH * 2)


def test_initialize_rejects_malformed_seed() -> None:
    with pytest.raises(ValueError):
        HashChainTraversal.initialize(TEST_CHAIN, b"short", 8)


def test_lifecycle_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="pebble_spec")
    traversal = HashChainTraversal.initialize(TEST_CHAIN, SEED, 4)
    list(traversal)

    messages = [record.getMessage() for record in caplog.records]
    assert "Initialized traversal of a 4-element chain with 2 pebbles" in messages
    assert "Released the last element of a 4-element chain" in messages
    assert any(message.startswith("Round 1 released position 3") for message in messages)


class TestPersistence:
    """Persisting state and resuming from it."""

    def test_state_layout(self) -> None:
        traversal = HashChainTraversal.initialize(TEST_CHAIN, SEED, 8)
        encoded = traversal.to_bytes()

        # chain_length || round || offset || three 56-byte pebbles
        assert len(encoded) == 8 + 8 + 4 + 3 * 56
        assert encoded[:8] == Uint64(8).encode_bytes()
        assert encoded[8:16] == Uint64(0).encode_bytes()
        assert encoded[16:20] == (20).to_bytes(4, "little")

    def test_resume_at_every_round(self) -> None:
        """Resuming from any round yields exactly the remaining outputs."""
        n = 32
        expected = list(HashChainTraversal.initialize(TEST_CHAIN, SEED, n))

        traversal = HashChainTraversal.initialize(TEST_CHAIN, SEED, n)
        released = []
        while not traversal.is_exhausted:
            traversal = HashChainTraversal.from_bytes(TEST_CHAIN, traversal.to_bytes())
            released.append(traversal.next_output())

        assert released == expected
        restored = HashChainTraversal.from_bytes(TEST_CHAIN, traversal.to_bytes())
        assert restored.is_exhausted
        with pytest.raises(ExhaustedChain):
            restored.next_output()

    def test_state_snapshot_is_immutable(self) -> None:
        traversal = HashChainTraversal.initialize(TEST_CHAIN, SEED, 8)
        before = traversal.state
        traversal.next_output()
        traversal.next_output()
        assert int(before.round) == 0
        assert traversal.state != before
        assert HashChainTraversal.from_state(TEST_CHAIN, before).next_output() == (
            TEST_CHAIN.apply_times(SEED, 7)
        )

    def test_undecodable_bytes(self, caplog: pytest.LogCaptureFixture) -> None:
        with pytest.raises(CorruptState, match="undecodable state"):
            HashChainTraversal.from_bytes(TEST_CHAIN, b"\x01\x02\x03")
        assert any(record.levelno == logging.WARNING for record in caplog.records)

    def test_truncated_bytes(self) -> None:
        encoded = HashChainTraversal.initialize(TEST_CHAIN, SEED, 8).to_bytes()
        with pytest.raises(CorruptState):
            HashChainTraversal.from_bytes(TEST_CHAIN, encoded[:-1])

    def test_invalid_chain_length(self) -> None:
        state = TraversalState(chain_length=Uint64(12), round=Uint64(0), pebbles=PebbleList())
        with pytest.raises(CorruptState, match="invalid chain length") as excinfo:
            HashChainTraversal.from_state(TEST_CHAIN, state)
        assert isinstance(excinfo.value.__cause__, InvalidChainLength)

    def test_chain_length_above_preset(self) -> None:
        state = TraversalState(
            chain_length=Uint64(TEST_CONFIG.MAX_CHAIN_LENGTH * 2),
            round=Uint64(0),
            pebbles=PebbleList(),
        )
        with pytest.raises(CorruptState, match="exceeds the maximum"):
            HashChainTraversal.from_state(TEST_CHAIN, state)

    def test_round_past_end(self) -> None:
        state = HashChainTraversal.initialize(TEST_CHAIN, SEED, 8).state
        tampered = state.model_copy(update={"round": Uint64(9)})
        with pytest.raises(CorruptState, match="past the chain length"):
            HashChainTraversal.from_state(TEST_CHAIN, tampered)

    def test_rewound_round(self, caplog: pytest.LogCaptureFixture) -> None:
        """Replaying a stale round counter against newer pebbles is detected."""
        traversal = HashChainTraversal.initialize(TEST_CHAIN, SEED, 8)
        traversal.next_output()
        traversal.next_output()
        tampered = traversal.state.model_copy(update={"round": Uint64(0)})

        with caplog.at_level(logging.WARNING):
            with pytest.raises(CorruptState):
                HashChainTraversal.from_state(TEST_CHAIN, tampered)
        assert "Rejected persisted traversal state" in caplog.text

    def test_dropped_pebble(self) -> None:
        state = HashChainTraversal.initialize(TEST_CHAIN, SEED, 8).state
        tampered = state.model_copy(update={"pebbles": PebbleList(data=state.pebbles.data[1:])})
        with pytest.raises(CorruptState, match="missing pebble"):
            HashChainTraversal.from_bytes(TEST_CHAIN, tampered.encode_bytes())
