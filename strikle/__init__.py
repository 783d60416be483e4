"""Solver for a closed-world "guess the pro player" game."""

__version__ = "0.1.0"
