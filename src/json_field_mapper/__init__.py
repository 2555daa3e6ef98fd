"""Flatten arbitrary JSON objects into indexable root and keyed terms."""

__version__ = "0.1.0"
