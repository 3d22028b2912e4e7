"""Manuscript import: chapter/act structure detection for long-form text."""

__version__ = "0.1.0"
