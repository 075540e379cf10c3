"""
Global configuration for pebbled hash-chain traversal.

This module contains environment-specific settings that apply across all subspecs.
"""

import os

_SUPPORTED_PEBBLE_ENVS: list[str] = ["prod", "test"]

PEBBLE_ENV = os.environ.get("PEBBLE_ENV", "prod").lower()
"""The environment flag ('prod' or 'test'). Defaults to 'prod'."""

if PEBBLE_ENV not in _SUPPORTED_PEBBLE_ENVS:
    raise ValueError(
        f"Invalid PEBBLE_ENV environment variable: '{PEBBLE_ENV}'. "
        f"Supported values: {_SUPPORTED_PEBBLE_ENVS}"
    )
