"""Fetch web pages, detect charset and language, classify links and extract news."""

__version__ = "0.1.0"