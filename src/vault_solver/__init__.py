"""Batch auction solver for vault deposit orders."""

__version__ = "0.1.0"
