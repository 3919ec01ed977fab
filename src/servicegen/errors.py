from __future__ import annotations


class ServicegenError(Exception):
    """Base class for all servicegen errors."""


class SpecError(ServicegenError):
    """Raised when a service definition document is invalid."""


class GenerationError(ServicegenError):
    """Raised when the emitter meets a model it cannot render.

    The loader validates definitions up front, so these indicate an
    inconsistent model rather than bad user input.
    """


class ServiceBindingError(GenerationError):
    """Raised when a field kind cannot occupy a path, query or header slot."""
