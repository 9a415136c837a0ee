"""Docfolio: document and folder management API."""

__version__ = "1.0.0"
