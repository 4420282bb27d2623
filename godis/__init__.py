"""Data structures and utilities for a Redis-style key-value server."""

__version__ = "1.2.9"