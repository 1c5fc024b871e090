"""Spherical geodesy and proximity helpers for located items."""

__version__ = "0.1.0"
