"""Adapters — Discord, agent backend, and HTTP implementations of the ports."""
