"""Adapters - implementations of the topology ports."""
