"""
Galaxy generation errors.

Domain-specific exceptions raised by the generator. They are independent of
the transport layer; the API maps them onto HTTP responses.
"""

from __future__ import annotations


class GalaxyGenerationError(Exception):
    """Base exception for galaxy generation."""

    pass


class GalaxyConfigError(GalaxyGenerationError, ValueError):
    """Raised when a configuration cannot be realised by the generator."""

    def __init__(self, message: str, system_id: str | None = None):
        self.system_id = system_id
        if system_id:
            message = f"{message} (system: {system_id})"
        super().__init__(message)
