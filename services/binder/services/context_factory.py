"""
Request context factory.

Snapshots a Starlette Request into an InputContext. All awaiting (body and
form reads) happens here so the binding engine itself stays synchronous.
"""

import logging
from typing import Any, Dict, List

from starlette.datastructures import UploadFile
from starlette.requests import Request

from ..models.context import InputContext

logger = logging.getLogger("binder.context")

MULTIPART_MEDIA_TYPE = "multipart/form-data"
FORM_MEDIA_TYPE = "application/x-www-form-urlencoded"


def media_type_of(request: Request) -> str:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower()


async def build_input_context(request: Request) -> InputContext:
    """
    Build an InputContext from a Starlette request.

    Args:
        request: Incoming request (path params already resolved by routing)

    Returns:
        InputContext snapshot of all eight namespaces
    """
    body = await request.body()
    media_type = media_type_of(request)
    multipart = media_type == MULTIPART_MEDIA_TYPE

    form_params: Dict[str, List[str]] = {}
    files: Dict[str, Any] = {}
    if multipart or media_type == FORM_MEDIA_TYPE:
        # Starlette replays the cached body, so reading it above is safe.
        form = await request.form()
        for name, value in form.multi_items():
            if isinstance(value, UploadFile):
                files.setdefault(name, value)
            else:
                form_params.setdefault(name, []).append(value)

    headers: Dict[str, str] = {}
    for name, value in request.headers.items():
        headers.setdefault(name, value)

    multi_query_params: Dict[str, List[str]] = {}
    for name, value in request.query_params.multi_items():
        multi_query_params.setdefault(name, []).append(value)

    # SessionMiddleware stores an empty dict until something is written.
    session = request.scope.get("session")
    path_params = request.scope.get("path_params")

    context = InputContext(
        method=request.method,
        path=request.url.path,
        headers=headers,
        multi_query_params=multi_query_params,
        path_params=dict(path_params) if path_params is not None else None,
        cookies=list(request.cookies.items()),
        attributes=dict(request.scope.get("state") or {}),
        session=dict(session) if session else None,
        body=body,
        multipart=multipart,
        form_params=form_params,
        files=files,
    )
    logger.debug(
        f"Built input context for {request.method} {request.url.path}",
        extra={"multipart": multipart, "has_session": context.has_session()},
    )
    return context
