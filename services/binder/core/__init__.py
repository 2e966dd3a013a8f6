"""
Core logic package.

Provides bind errors and the type conversion service.
The binding engine lives in ``core.binder``.
"""

from .conversion import ConversionService, ConversionServiceError
from .exceptions import (
    BindError,
    BodyKeyNotFoundError,
    ConstructionError,
    ConversionError,
    MalformedBodyError,
    MissingDescriptorError,
    MissingValueError,
    UnsupportedSourceError,
)

__all__ = [
    "ConversionService",
    "ConversionServiceError",
    "BindError",
    "BodyKeyNotFoundError",
    "ConstructionError",
    "ConversionError",
    "MalformedBodyError",
    "MissingDescriptorError",
    "MissingValueError",
    "UnsupportedSourceError",
]
