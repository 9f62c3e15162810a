"""Plantation estate management: estates, trees, height statistics and drone patrol plans over HTTP."""

__version__ = "0.1.0"