"""Constants used throughout the type system."""

from __future__ import annotations

from typing import Final

OFFSET_BYTE_LENGTH: Final = 4
"""The number of bytes used to encode the offset of a variable-sized field."""
