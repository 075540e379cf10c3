"""Exception hierarchy for hash-chain traversal."""

from __future__ import annotations


class HashChainError(Exception):
    """
    Base exception for all traversal errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class InvalidChainLength(HashChainError, ValueError):
    """
    Raised when a chain length cannot be traversed.

    Lengths must be powers of two, at least 2, and within the preset's maximum.
    Length 1 is a power of two but is still refused: a one-element chain
    would need zero pebbles and leave nowhere to keep the seed.

    Attributes:
        chain_length: The rejected length.
        max_length: The preset's maximum, if that was the violated bound.
    """

    def __init__(self, chain_length: int, *, max_length: int | None = None) -> None:
        self.chain_length = chain_length
        self.max_length = max_length

        if max_length is not None and chain_length > max_length:
            msg = f"Chain length {chain_length} exceeds the maximum of {max_length}"
        elif chain_length == 1:
            # A single-element chain has no level to hold the seed.
            msg = "Chain length 1 is not supported: a power of two >= 2 is required"
        else:
            msg = f"Chain length must be a power of two >= 2, got {chain_length}"

        super().__init__(msg)


class ExhaustedChain(HashChainError):
    """
    Raised when an output is requested after every element has been released.

    Attributes:
        chain_length: Length of the exhausted chain.
    """

    def __init__(self, chain_length: int) -> None:
        self.chain_length = chain_length
        super().__init__(f"All {chain_length} chain elements have already been released")


class CorruptState(HashChainError):
    """
    Raised when traversal state fails its consistency checks.

    There is no partial recovery: the caller must re-derive the traversal from the seed.

    Attributes:
        detail: Description of the inconsistency.
        level: The offending pebble level, if the problem is local to one level.
    """

    def __init__(self, detail: str, *, level: int | None = None) -> None:
        self.detail = detail
        self.level = level

        msg = f"Corrupt traversal state: {detail}"
        if level is not None:
            msg = f"{msg} (level {level})"

        super().__init__(msg)
