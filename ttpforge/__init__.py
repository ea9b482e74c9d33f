"""Argument handling, variable expansion and step actions for running TTPs."""

__version__ = "0.1.0"