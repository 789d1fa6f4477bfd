"""Prebundle: component compilation for dependency prebundling."""

__version__ = "0.1.0"
