"""Rolling-window tracker of contest vote increments."""

__version__ = "0.1.0"
