"""Total network payload weight audit."""

__version__ = "0.1.0"
