"""Gratitude CLI: flag library-usage lines and say thanks to their authors."""

__version__ = "0.1.0"
