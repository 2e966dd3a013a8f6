"""
Data model definitions package.

Aggregates binding metadata and request context models for use in other modules.
"""

from .context import InputContext, RequestContext
from .descriptors import (
    BindingPlan,
    BindingRegistry,
    FieldDescriptor,
    RequestField,
    Shape,
    bindable,
    build_binding_plan,
)
from .source import Source

__all__ = [
    "InputContext",
    "RequestContext",
    "BindingPlan",
    "BindingRegistry",
    "FieldDescriptor",
    "RequestField",
    "Shape",
    "bindable",
    "build_binding_plan",
    "Source",
]
