"""
Request Binder - demo server

Binds headers, query/path parameters, cookies, request attributes, session
attributes and body/multipart fields into typed request models.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .api.deps import Bound, bound_targets
from .config import BinderConfig, config
from .core.binder import RequestBinder
from .core.conversion import ConversionService
from .core.logging_config import setup_logging
from .exceptions import register_exception_handlers
from .middleware import DefaultAttributesMiddleware, request_id_middleware
from .models.descriptors import BindingRegistry
from .models.requests import ProductLookup, ProductRequestParam, ProductRequestPath

# Logger setup
setup_logging()
logger = logging.getLogger("binder.main")


def build_request_binder(binder_config: BinderConfig) -> RequestBinder:
    return RequestBinder(
        conversion_service=ConversionService(),
        registry=BindingRegistry(hyphenate_headers=binder_config.HEADER_KEY_HYPHENATE),
    )


def create_app(binder_config: BinderConfig = config) -> FastAPI:
    """Assemble the FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        binder = build_request_binder(binder_config)
        # Plan every bound target up front; misconfigured targets fail startup.
        targets = bound_targets(app)
        for target_type in targets:
            binder.registry.plan_for(target_type)
        app.state.request_binder = binder
        logger.info(f"Request binder initialized with {len(targets)} bound targets")
        yield
        logger.info("Request binder shut down")

    app = FastAPI(
        title="Request Binder",
        lifespan=lifespan,
        root_path=binder_config.root_path,
    )

    # Innermost first: attributes, then sessions, request id outermost.
    app.add_middleware(
        DefaultAttributesMiddleware, defaults=binder_config.DEFAULT_REQUEST_ATTRIBUTES
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=binder_config.SESSION_SECRET_KEY,
        session_cookie=binder_config.SESSION_COOKIE_NAME,
        max_age=binder_config.SESSION_MAX_AGE,
    )
    app.middleware("http")(request_id_middleware)

    register_exception_handlers(app)
    register_routes(app)
    return app


def register_routes(app: FastAPI) -> None:
    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.post("/create", status_code=201)
    async def create_product(product: Bound[ProductRequestParam]):
        logger.info(f"Received request to create a product (PARAM): {product.name}")
        return _created(product, "Product successfully created with quantity from parameters.")

    @app.post("/create/{quantity}", status_code=201)
    async def create_product_with_path(product: Bound[ProductRequestPath]):
        logger.info(f"Received request to create a product (PATH): {product.name}")
        return _created(product, "Product successfully created with quantity from path.")

    @app.post("/init-session")
    async def init_session(request: Request):
        request.session["description"] = "Premium Product"
        return JSONResponse(content={"message": "Session initialized"})

    @app.get("/products/{sku}")
    async def lookup_product(lookup: Bound[ProductLookup]):
        return {
            "sku": lookup.sku,
            "page": lookup.page,
            "client_version": lookup.x_client_version,
            "include_archived": lookup.include_archived,
        }


def _created(product, message: str) -> dict:
    return {
        "message": message,
        "name": product.name,
        "description": product.description,
        "quantity": product.quantity,
        "user_id": str(product.user_id),
        "http_header": product.http_header,
        "filename": product.multipart_file.filename,
        "custom_attribute": product.custom_attribute,
    }


app = create_app()
