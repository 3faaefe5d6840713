"""Almanac - periodic notes and calendar navigation for Markdown vaults."""

__version__ = "0.1.0"
