"""Lap Bom - calculus solver front-end for a remote language model."""

__version__ = "0.1.0"
