"""Moments Archive: a curated archive of design moments."""

__version__ = "0.1.0"
