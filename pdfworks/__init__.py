"""Chromium conversion options, form parsing, HTTP error mapping and structured logging."""

__version__ = "0.1.0"