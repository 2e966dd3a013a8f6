"""
Where: services/binder/middleware.py
What: HTTP middleware for request-id propagation, access logging and default request attributes.
Why: Isolate cross-cutting request concerns from app assembly.
"""

import logging
import time
from typing import Any, Dict, Mapping

from fastapi import Request

from services.common.core.request_context import clear_request_id, generate_request_id, set_request_id

logger = logging.getLogger("binder.main")

REQUEST_ID_HEADER = "X-Request-Id"


async def request_id_middleware(request: Request, call_next):
    """Middleware for Request ID propagation and structured access logging."""
    start_time = time.perf_counter()

    incoming = request.headers.get(REQUEST_ID_HEADER)
    req_id = set_request_id(incoming) if incoming else generate_request_id()

    try:
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = req_id

        process_time_ms = round((time.perf_counter() - start_time) * 1000, 2)
        logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "request_id": req_id,
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "latency_ms": process_time_ms,
                "user_agent": request.headers.get("user-agent"),
                "client_ip": request.client.host if request.client else None,
            },
        )
        return response
    finally:
        clear_request_id()


class DefaultAttributesMiddleware:
    """
    Sets request attributes (``request.state``) that upstream layers left unset.

    Existing values are never overwritten.
    """

    def __init__(self, app, defaults: Mapping[str, Any]):
        self.app = app
        self.defaults: Dict[str, Any] = dict(defaults)

    async def __call__(self, scope, receive, send):
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        state = scope.setdefault("state", {})
        for name, value in self.defaults.items():
            if state.get(name) is None:
                state[name] = value

        await self.app(scope, receive, send)
