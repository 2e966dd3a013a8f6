"""
Type conversion service.

Coerces raw request values (mostly text) to declared field types.
Lookup order: registered converters, the built-in text and enum converters,
then a pydantic TypeAdapter in lax mode.
"""

import enum
import functools
import logging
import threading
from typing import Any, Callable, Dict, Type

from pydantic import TypeAdapter, ValidationError

from .exceptions import type_name

logger = logging.getLogger("binder.conversion")

Converter = Callable[[Any], Any]


class ConversionServiceError(Exception):
    """Raised when a value cannot be converted to the requested type."""

    def __init__(self, value: Any, target_type: Any, cause: Exception):
        self.value = value
        self.target_type = target_type
        self.cause = cause
        super().__init__(
            f"Cannot convert {type_name(type(value))} to {type_name(target_type)}: {cause}"
        )


@functools.lru_cache(maxsize=256)
def _type_adapter(target_type: Any) -> TypeAdapter:
    return TypeAdapter(target_type)


def _to_text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return str(value)


class ConversionService:
    """
    Generic converter shared by all bind operations.

    Converters are registered during application setup; lookups afterwards
    are read-only.
    """

    def __init__(self):
        self._converters: Dict[type, Converter] = {}
        self._lock = threading.Lock()

    def register(self, target_type: type, converter: Converter) -> None:
        """
        Register a custom converter for a target type (and its subclasses).

        Args:
            target_type: Declared field type handled by the converter
            converter: Callable turning a raw value into target_type
        """
        with self._lock:
            self._converters[target_type] = converter
        logger.info(f"Registered converter for {type_name(target_type)}")

    def find_converter(self, target_type: Any) -> Converter:
        if isinstance(target_type, type):
            for candidate in target_type.__mro__:
                converter = self._converters.get(candidate)
                if converter is not None:
                    return converter
            if target_type is str:
                return _to_text
            if issubclass(target_type, enum.Enum):
                return self._enum_converter(target_type)
        return self._adapt(target_type)

    def _enum_converter(self, target_type: Type[enum.Enum]) -> Converter:
        by_value = self._adapt(target_type)

        def convert(value: Any) -> enum.Enum:
            try:
                return by_value(value)
            except ValidationError:
                # Request text may name the member instead of carrying its value.
                member = target_type.__members__.get(_to_text(value))
                if member is None:
                    raise
                return member

        return convert

    def _adapt(self, target_type: Any) -> Converter:
        try:
            hash(target_type)
        except TypeError:
            # Unhashable annotations cannot be cached.
            adapter = TypeAdapter(target_type)
        else:
            adapter = _type_adapter(target_type)
        return functools.partial(adapter.validate_python, strict=False)

    def convert(self, value: Any, target_type: Any) -> Any:
        """
        Convert a value to the target type.

        Raises:
            ConversionServiceError: unsupported pair or malformed input
        """
        try:
            converter = self.find_converter(target_type)
            return converter(value)
        except ValidationError as e:
            raise ConversionServiceError(value, target_type, e) from e
        except Exception as e:
            # Custom converters and pydantic schema generation fail with arbitrary errors.
            logger.debug(f"Converter for {type_name(target_type)} failed: {e!r}")
            raise ConversionServiceError(value, target_type, e) from e
