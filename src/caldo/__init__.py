"""Caldo: a personal day board of tasks laid out on a time axis."""

__version__ = "0.3.0"
