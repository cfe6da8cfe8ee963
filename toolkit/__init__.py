"""Utility Toolkit — a catalog of interactive tools rendered as routable pages."""
__version__ = "0.1.0"
