"""
Where: services/binder/tests/test_error_handling.py
What: HTTP status mapping and response shape of bind errors.
Why: Clients must be able to tell bad input (4xx) from binder misconfiguration (5xx).
"""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import Request

from services.binder.core.exceptions import (
    BIND_ERROR_STATUS,
    BindError,
    BodyKeyNotFoundError,
    ConstructionError,
    ConversionError,
    MalformedBodyError,
    MissingDescriptorError,
    MissingValueError,
    UnsupportedSourceError,
    bind_exception_handler,
    status_for,
)
from services.binder.models.source import Source


class Product:
    pass


ERRORS = [
    (MissingDescriptorError(Product, "count"), 500),
    (MissingValueError("username", str, Source.BODY, Product), 400),
    (BodyKeyNotFoundError("username", Product), 400),
    (MalformedBodyError("username", ValueError("bad json"), Product), 400),
    (UnsupportedSourceError("QUERY", Product), 500),
    (ConversionError("quantity", "five", int, ValueError("bad int"), Product), 422),
    (ConstructionError(Product, TypeError("no default constructor")), 500),
]


@pytest.mark.parametrize("error, expected_status", ERRORS)
def test_status_for_error_kind(error, expected_status):
    assert status_for(error) == expected_status
    assert error.target_type is Product


def test_every_error_kind_has_distinct_code():
    codes = [error.code for error, _ in ERRORS]

    assert len(set(codes)) == len(codes)
    assert set(BIND_ERROR_STATUS) == {type(error) for error, _ in ERRORS}


def test_unmapped_bind_error_is_server_error():
    assert status_for(BindError("unexpected")) == 500


def test_missing_value_message():
    error = MissingValueError("description", str, Source.SESSION)

    assert str(error) == (
        "Value not found for key 'description' with type str from data source SESSION"
    )


@pytest.mark.asyncio
async def test_bind_exception_handler_response():
    request = MagicMock(spec=Request)
    request.method = "POST"
    request.url.path = "/create"
    error = BodyKeyNotFoundError("username")

    response = await bind_exception_handler(request, error)

    assert response.status_code == 400
    assert json.loads(response.body) == {
        "message": "Request Binding Failed",
        "code": "BIND_BODY_KEY_NOT_FOUND",
        "detail": "Key 'username' not found in the request body",
    }
