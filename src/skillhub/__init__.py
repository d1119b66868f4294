"""skillhub: keep one hub of skills projected into many tool directories."""

__version__ = "0.1.0"
