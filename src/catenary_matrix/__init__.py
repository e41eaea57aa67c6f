"""Catenary Matrix: a live transit departure board for the terminal."""

__version__ = "0.3.0"
