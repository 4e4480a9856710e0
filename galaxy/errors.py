from __future__ import annotations


class GalaxyError(Exception):
    """Base class for errors raised by the galaxy generator."""


class GalaxyConfigError(GalaxyError, ValueError):
    """Raised when a parameter set cannot describe a galaxy."""
