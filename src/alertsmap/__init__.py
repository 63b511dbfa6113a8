"""Braille terminal rendering of Ukraine's regional map."""

__version__ = "0.1.0"
