"""Directory-backed markdown note store with a JSON index."""

__version__ = "0.1.0"
