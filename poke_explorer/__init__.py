"""Poke Explorer: deterministic world spawning for a location-based catching game."""

__version__ = "0.1.0"

__all__ = ["__version__"]
