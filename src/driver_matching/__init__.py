"""Geohash-indexed driver matching service."""

__version__ = "0.1.0"
