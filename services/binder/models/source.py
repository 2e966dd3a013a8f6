"""
Source category model.

Closed set of request namespaces a bound field can be read from.
"""

from enum import Enum


class Source(str, Enum):
    """Request namespace a field value is extracted from."""

    # HTTP request header.
    HEADER = "HEADER"
    # Query string parameter (or form parameter).
    PARAM = "PARAM"
    # URL path variable resolved by the router.
    PATH = "PATH"
    # Request cookie.
    COOKIE = "COOKIE"
    # Request-scoped attribute set by upstream middleware.
    ATTRIBUTE = "ATTRIBUTE"
    # Field of the request body (JSON object or multipart text field).
    BODY = "BODY"
    # Session attribute.
    SESSION = "SESSION"
    # multipart/form-data text field or uploaded file.
    MULTIPART = "MULTIPART"
