"""Subpackages of pebble_spec."""
