"""Shared fixtures for the hash-chain tests."""

from __future__ import annotations

import hashlib
from typing import Any

import pytest

from pebble_spec.subspecs.hashchain import chain as chain_module


class HashCounter:
    """Stands in for `hashlib` inside the chain module and counts every digest."""

    def __init__(self) -> None:
        self.calls = 0

    def new(self, name: str, data: bytes = b"") -> Any:
        self.calls += 1
        return hashlib.new(name, data)

    def reset(self) -> int:
        """Return the count so far and start again from zero."""
        calls, self.calls = self.calls, 0
        return calls


@pytest.fixture
def hash_counter(monkeypatch: pytest.MonkeyPatch) -> HashCounter:
    """Count one-way function applications made through the chain module."""
    counter = HashCounter()
    monkeypatch.setattr(chain_module, "hashlib", counter)
    return counter
