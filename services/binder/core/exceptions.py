"""
Custom exception classes.

Represent errors raised while binding request data to a target type.
"""

import logging
from typing import Any, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def type_name(tp: Any) -> str:
    return getattr(tp, "__qualname__", None) or getattr(tp, "__name__", None) or repr(tp)


def source_name(source: Any) -> str:
    return getattr(source, "value", None) or str(source)


class BindError(Exception):
    """Base exception class for request binding."""

    code = "BIND_ERROR"

    def __init__(self, message: str, target_type: Optional[type] = None):
        self.target_type = target_type
        super().__init__(message)


class MissingDescriptorError(BindError):
    """Raised when a positional target field carries no RequestField."""

    code = "BIND_MISSING_DESCRIPTOR"

    def __init__(self, target_type: type, field_name: str):
        self.field_name = field_name
        super().__init__(
            f"Missing RequestField annotation for field '{field_name}' "
            f"of {type_name(target_type)}",
            target_type,
        )


class MissingValueError(BindError):
    """Raised when no raw value exists for a required field."""

    code = "BIND_MISSING_VALUE"

    def __init__(self, key: str, declared_type: Any, source: Any, target_type: Optional[type] = None):
        self.key = key
        self.declared_type = declared_type
        self.source = source
        super().__init__(
            f"Value not found for key '{key}' with type {type_name(declared_type)} "
            f"from data source {source_name(source)}",
            target_type,
        )


class BodyKeyNotFoundError(BindError):
    """Raised when the parsed request body does not contain the key."""

    code = "BIND_BODY_KEY_NOT_FOUND"

    def __init__(self, key: str, target_type: Optional[type] = None):
        self.key = key
        super().__init__(f"Key '{key}' not found in the request body", target_type)


class MalformedBodyError(BindError):
    """Raised when the request body cannot be decoded or parsed."""

    code = "BIND_MALFORMED_BODY"

    def __init__(self, key: str, cause: Exception, target_type: Optional[type] = None):
        self.key = key
        self.cause = cause
        super().__init__(
            f"Request body could not be parsed while reading key '{key}': {cause}",
            target_type,
        )


class UnsupportedSourceError(BindError):
    """Raised when a descriptor names an unknown source category."""

    code = "BIND_UNSUPPORTED_SOURCE"

    def __init__(self, source: Any, target_type: Optional[type] = None):
        self.source = source
        super().__init__(f"Unsupported data source: {source!r}", target_type)


class ConversionError(BindError):
    """Raised when a raw value cannot be converted to the declared type."""

    code = "BIND_CONVERSION_FAILED"

    def __init__(
        self,
        key: str,
        raw_value: Any,
        declared_type: Any,
        cause: Exception,
        target_type: Optional[type] = None,
    ):
        self.key = key
        self.raw_type = type(raw_value)
        self.declared_type = declared_type
        self.cause = cause
        super().__init__(
            f"Failed to convert value for key '{key}' from {type_name(self.raw_type)} "
            f"to type {type_name(declared_type)}",
            target_type,
        )


class ConstructionError(BindError):
    """Raised when the target instance cannot be constructed or populated."""

    code = "BIND_CONSTRUCTION_FAILED"

    def __init__(self, target_type: type, cause: Exception):
        self.cause = cause
        super().__init__(f"Failed to construct {type_name(target_type)}: {cause}", target_type)


# ===========================================
# Exception Handlers
# ===========================================

# Client data problems are 4xx, binding configuration problems are 5xx.
BIND_ERROR_STATUS = {
    MissingValueError: status.HTTP_400_BAD_REQUEST,
    BodyKeyNotFoundError: status.HTTP_400_BAD_REQUEST,
    MalformedBodyError: status.HTTP_400_BAD_REQUEST,
    ConversionError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    MissingDescriptorError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    UnsupportedSourceError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConstructionError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: BindError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in BIND_ERROR_STATUS:
            return BIND_ERROR_STATUS[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def bind_exception_handler(request: Request, exc: BindError):
    """
    Handler for request binding errors.
    """
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(
            f"Request binding misconfigured: {exc}",
            extra={"path": request.url.path, "method": request.method, "code": exc.code},
        )
    else:
        logger.info(
            f"Request binding rejected: {exc}",
            extra={"path": request.url.path, "method": request.method, "code": exc.code},
        )

    return JSONResponse(
        status_code=status_code,
        content={"message": "Request Binding Failed", "code": exc.code, "detail": str(exc)},
    )


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler for unhandled exceptions.
    """
    error_detail = str(exc)
    logger.error(
        f"Global exception handler caught: {exc}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error", "detail": error_detail},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for HTTPException.
    """
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for validation errors.
    """
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"message": "Validation Error", "detail": str(exc.errors())},
    )
