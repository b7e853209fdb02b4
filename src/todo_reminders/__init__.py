"""Task list with one-shot reminder notifications."""

__version__ = "0.1.0"
