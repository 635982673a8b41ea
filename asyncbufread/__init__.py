"""Async buffered reader with peek and passthrough support."""

__version__ = "0.1.3"
__all__ = ["protocol", "reader"]