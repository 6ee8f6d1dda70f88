"""Template-driven synthesis of backend service modules."""

__version__ = "0.1.0"
