"""Nullshot - smart-contract audit and fix pipeline."""

__version__ = "0.1.0"
