"""Pagecraft - landing page storage and in-browser editing core."""

__version__ = "0.1.0"
