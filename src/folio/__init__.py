"""Folio - headless page-view runner for a JSON-driven portfolio site."""

__version__ = "0.1.0"
