"""Keep a community page widget in sync with an HTTP content source."""

__version__ = "0.1.0"
