"""
Dependency Injection for Binder API.

Manage request binding dependencies using FastAPI Depends.
"""

import inspect
from typing import Annotated, Any, List, Optional, get_args, get_origin

from fastapi import Depends, FastAPI, Request
from fastapi import params
from fastapi.routing import APIRoute

from ..core.binder import RequestBinder
from ..models.context import InputContext
from ..services.context_factory import build_input_context


# ==========================================
# 1. Service Accessors
# ==========================================


def get_request_binder(request: Request) -> RequestBinder:
    binder = getattr(request.app.state, "request_binder", None)
    if binder is None:
        binder = RequestBinder()
        request.app.state.request_binder = binder
    return binder


async def get_input_context(request: Request) -> InputContext:
    return await build_input_context(request)


# Service Dependency Type Aliases
RequestBinderDep = Annotated[RequestBinder, Depends(get_request_binder)]
InputContextDep = Annotated[InputContext, Depends(get_input_context)]


# ==========================================
# 2. Binding Dependencies
# ==========================================


class BindRequest:
    """
    Marks a handler parameter as bound from request data.

    Usage in handler signatures::

        async def create(product: Annotated[Product, Depends(BindRequest(Product))]): ...
        async def create(product: Bound[Product]): ...
    """

    def __init__(self, target_type: type):
        self.target_type = target_type

    async def __call__(self, binder: RequestBinderDep, context: InputContextDep) -> Any:
        return binder.bind(self.target_type, context)

    def __repr__(self) -> str:
        return f"BindRequest({self.target_type.__name__})"


class Bound:
    """``Bound[T]`` is shorthand for ``Annotated[T, Depends(BindRequest(T))]``."""

    def __class_getitem__(cls, target_type: type) -> Any:
        return Annotated[target_type, Depends(BindRequest(target_type))]


def bound_target(annotation: Any) -> Optional[type]:
    """
    Return the target type of a handler parameter carrying the BindRequest marker.
    """
    if get_origin(annotation) is not Annotated:
        return None
    for item in get_args(annotation)[1:]:
        if isinstance(item, params.Depends) and isinstance(item.dependency, BindRequest):
            return item.dependency.target_type
    return None


def supports_parameter(annotation: Any) -> bool:
    """
    Whether a handler parameter annotation carries the BindRequest marker.
    """
    return bound_target(annotation) is not None


def bound_targets(app: FastAPI) -> List[type]:
    """
    Collect the target types bound by the app's route handlers.

    Args:
        app: Application with routes registered

    Returns:
        Target types in route order, without duplicates
    """
    targets: List[type] = []
    for route in app.routes:
        if not isinstance(route, APIRoute):
            continue
        for parameter in inspect.signature(route.endpoint).parameters.values():
            if not supports_parameter(parameter.annotation):
                continue
            target_type = bound_target(parameter.annotation)
            if target_type not in targets:
                targets.append(target_type)
    return targets
