"""Interior Manager: backend for interior design and construction project management."""

__version__ = "0.1.0"
