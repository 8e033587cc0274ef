"""Brand-bot prediction market simulation for live game events."""

__version__ = "0.1.0"
