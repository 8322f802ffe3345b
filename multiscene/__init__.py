"""Animated 2D shapes rendered across several windows that share one GL context."""

__version__ = "0.1.0"
