"""VERIFY blog publisher."""

__version__ = "1.0.0"
