"""Select-based TCP servers that greet clients and echo what they send."""

__version__ = "0.1.0"
__all__ = ["__version__"]