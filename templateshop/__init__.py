"""Storefront for digital templates and bundles."""

__version__ = "0.1.0"
