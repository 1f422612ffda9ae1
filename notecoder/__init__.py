"""Clinical note coding validator."""

__version__ = "1.0.0"
