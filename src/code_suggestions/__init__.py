"""Fill-in-the-middle code completion server."""

__version__ = "0.1.0"
