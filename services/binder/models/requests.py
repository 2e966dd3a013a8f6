"""
Product request payloads.

Bindable targets served by the demo routes.
"""

import uuid
from dataclasses import dataclass
from typing import Annotated, Optional

from starlette.datastructures import UploadFile

from .descriptors import RequestField, Shape, bindable
from .source import Source


@bindable
@dataclass(frozen=True)
class ProductRequestPath:
    name: Annotated[str, RequestField(Source.BODY, "username")]
    description: Annotated[str, RequestField(Source.SESSION, "description")]
    quantity: Annotated[int, RequestField(Source.PATH, "quantity")]
    user_id: Annotated[uuid.UUID, RequestField(Source.COOKIE, "userId")]
    http_header: Annotated[str, RequestField(Source.HEADER, "X-Custom-Header")]
    multipart_file: Annotated[UploadFile, RequestField(Source.MULTIPART, "file")]
    custom_attribute: Annotated[str, RequestField(Source.ATTRIBUTE, "customAttribute")]


@bindable
@dataclass(frozen=True)
class ProductRequestParam:
    name: Annotated[str, RequestField(Source.BODY, "username")]
    description: Annotated[str, RequestField(Source.SESSION, "description")]
    quantity: Annotated[int, RequestField(Source.PARAM, "quantity")]
    user_id: Annotated[uuid.UUID, RequestField(Source.COOKIE, "userId")]
    http_header: Annotated[str, RequestField(Source.HEADER, "X-Custom-Header")]
    multipart_file: Annotated[UploadFile, RequestField(Source.MULTIPART, "file")]
    custom_attribute: Annotated[str, RequestField(Source.ATTRIBUTE, "customAttribute")]


@bindable(shape=Shape.MUTABLE)
class ProductLookup:
    """Mutable lookup form; unannotated fields keep their defaults."""

    sku: Annotated[str, RequestField(Source.PATH)] = None
    page: Annotated[int, RequestField(Source.PARAM)] = None
    x_client_version: Annotated[str, RequestField(Source.HEADER)] = None
    include_archived: bool = False
    note: Optional[str] = None
