"""
Field descriptor models.

Declarative binding metadata attached to target types with ``typing.Annotated``::

    @bindable
    @dataclass(frozen=True)
    class ProductRequest:
        name: Annotated[str, RequestField(Source.BODY, "username")]
        quantity: Annotated[int, RequestField(Source.PATH, "quantity")]

A binding plan (shape + ordered descriptors) is built once per target type
and cached, so binding never re-inspects the class.
"""

import dataclasses
import logging
import threading
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, get_args, get_origin

from ..core.exceptions import MissingDescriptorError
from .source import Source

logger = logging.getLogger("binder.metadata")

PLAN_ATTRIBUTE = "__binding_plan__"


class Shape(str, Enum):
    """Assembly strategy of a bindable target type."""

    # Immutable type constructed with all values positionally.
    POSITIONAL = "POSITIONAL"
    # Default-constructible type populated field by field.
    MUTABLE = "MUTABLE"


def _normalize_source(source: Any) -> Any:
    if isinstance(source, Source):
        return source
    try:
        return Source(source)
    except ValueError:
        # Rejected by the engine at bind time.
        return source


@dataclass(frozen=True)
class RequestField:
    """
    Binding metadata for a single field.

    Args:
        source: Namespace to read from (defaults to the request body)
        key: Lookup key; empty means "derive from the field name"
    """

    source: Any = Source.BODY
    key: str = ""

    def __post_init__(self):
        object.__setattr__(self, "source", _normalize_source(self.source))


@dataclass(frozen=True)
class FieldDescriptor:
    """Resolved binding metadata of one target field."""

    name: str
    source: Any
    key: str
    declared_type: Any


@dataclass(frozen=True)
class BindingPlan:
    """Ordered field descriptors and assembly shape of a target type."""

    target_type: type
    shape: Shape
    descriptors: Tuple[FieldDescriptor, ...]


def derive_key(field_name: str, source: Any, hyphenate_headers: bool = True) -> str:
    """
    Derive the lookup key used when a RequestField has an empty key.

    Header names cannot carry underscores in practice, so header keys
    use hyphens instead (``x_custom_header`` -> ``x-custom-header``).
    """
    if source is Source.HEADER and hyphenate_headers:
        return field_name.replace("_", "-")
    return field_name


def is_named_tuple(target_type: type) -> bool:
    return isinstance(target_type, type) and issubclass(target_type, tuple) and hasattr(
        target_type, "_fields"
    )


def infer_shape(target_type: type) -> Shape:
    """Frozen dataclasses and NamedTuples are positional; anything else is mutable."""
    if is_named_tuple(target_type):
        return Shape.POSITIONAL
    if dataclasses.is_dataclass(target_type) and target_type.__dataclass_params__.frozen:
        return Shape.POSITIONAL
    return Shape.MUTABLE


def _split_annotation(hint: Any) -> Tuple[Any, Optional[RequestField]]:
    """Return the declared type and the RequestField carried by an annotation."""
    if get_origin(hint) is typing.Annotated:
        declared_type, *metadata = get_args(hint)
        for item in metadata:
            if isinstance(item, RequestField):
                return declared_type, item
        return declared_type, None
    return hint, None


def _positional_fields(target_type: type) -> Tuple[str, ...]:
    if is_named_tuple(target_type):
        return tuple(target_type._fields)
    if dataclasses.is_dataclass(target_type):
        init_fields = [f for f in dataclasses.fields(target_type) if f.init]
        keyword_only = [f.name for f in init_fields if f.kw_only]
        if keyword_only:
            raise TypeError(
                f"{target_type.__name__} cannot be bound positionally: "
                f"keyword-only fields {keyword_only}"
            )
        return tuple(f.name for f in init_fields)
    raise TypeError(
        f"{target_type.__name__} cannot be bound positionally: "
        "expected a dataclass or NamedTuple"
    )


def build_binding_plan(
    target_type: type, shape: Optional[Shape] = None, hyphenate_headers: bool = True
) -> BindingPlan:
    """
    Build the binding plan of a target type.

    Args:
        target_type: Class to inspect
        shape: Assembly shape; inferred from the class when omitted
        hyphenate_headers: Header key derivation rule for empty keys

    Returns:
        BindingPlan with descriptors in declaration order

    Raises:
        MissingDescriptorError: a positional field lacks a RequestField
    """
    shape = Shape(shape) if shape is not None else infer_shape(target_type)
    hints = typing.get_type_hints(target_type, include_extras=True)

    if shape is Shape.POSITIONAL:
        names = _positional_fields(target_type)
    else:
        names = tuple(hints)

    descriptors = []
    for name in names:
        declared_type, request_field = _split_annotation(hints.get(name, Any))
        if request_field is None:
            if shape is Shape.POSITIONAL:
                raise MissingDescriptorError(target_type, name)
            continue

        key = request_field.key or derive_key(name, request_field.source, hyphenate_headers)
        descriptors.append(
            FieldDescriptor(
                name=name,
                source=request_field.source,
                key=key,
                declared_type=declared_type,
            )
        )

    logger.debug(
        f"Built {shape.value} binding plan for {target_type.__name__} "
        f"with {len(descriptors)} fields"
    )
    return BindingPlan(target_type=target_type, shape=shape, descriptors=tuple(descriptors))


def bindable(cls: Optional[type] = None, *, shape: Optional[Shape] = None):
    """
    Class decorator marking a type as a bindable target.

    The binding plan is built at class definition time (with hyphenated
    header keys), so a positional type with an unannotated field fails on
    import rather than per request.
    Apply it on top of ``@dataclass``.
    """

    def wrap(target_type: type) -> type:
        setattr(target_type, PLAN_ATTRIBUTE, build_binding_plan(target_type, shape))
        return target_type

    if cls is None:
        return wrap
    return wrap(cls)


class BindingRegistry:
    """
    Cache of binding plans per target type.

    Plans attached by ``@bindable`` are reused when they were derived with
    the same header rule; otherwise (and for undecorated types) plans are
    built lazily on first use, keeping the attached shape.
    """

    def __init__(self, hyphenate_headers: bool = True):
        self.hyphenate_headers = hyphenate_headers
        self._plans: Dict[type, BindingPlan] = {}
        self._lock = threading.Lock()

    def plan_for(self, target_type: type) -> BindingPlan:
        attached = target_type.__dict__.get(PLAN_ATTRIBUTE)
        if attached is not None and self.hyphenate_headers:
            return attached

        plan = self._plans.get(target_type)
        if plan is not None:
            return plan

        shape = attached.shape if attached is not None else None
        with self._lock:
            plan = self._plans.get(target_type)
            if plan is None:
                plan = build_binding_plan(
                    target_type, shape=shape, hyphenate_headers=self.hyphenate_headers
                )
                self._plans[target_type] = plan
        return plan

    def clear(self) -> None:
        with self._lock:
            self._plans.clear()
