"""Copy files into zip archives, including archives nested inside archives."""

__version__ = "0.1.0"
