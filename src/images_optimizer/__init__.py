"""Batch image resizing and compression."""

__version__ = "0.1.0"
