"""Calm typing backend and client-side typing logic."""

__version__ = "0.1.0"
