"""Repair Finder aliases whose targets moved to a new root path."""

__version__ = "0.1.0"
