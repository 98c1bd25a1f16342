"""Mentorhub: user accounts and mentor directory API."""

__version__ = "0.1.0"
