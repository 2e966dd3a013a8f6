"""
Request Binder - Binding Engine

Standardizes the flow: RequestContext -> raw value -> converted value -> instance.
"""

import json
import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from ..models.context import RequestContext, is_file_type
from ..models.descriptors import BindingPlan, BindingRegistry, FieldDescriptor, Shape
from ..models.source import Source
from .conversion import ConversionService, ConversionServiceError
from .exceptions import (
    BindError,
    BodyKeyNotFoundError,
    ConstructionError,
    ConversionError,
    MalformedBodyError,
    MissingValueError,
    UnsupportedSourceError,
    source_name,
    type_name,
)

logger = logging.getLogger("binder.engine")

T = TypeVar("T")

Resolver = Callable[[FieldDescriptor], Any]

_UNREAD = object()
_EMPTY_BODY = object()


def satisfies(value: Any, declared_type: Any) -> bool:
    """Whether a raw value can be used as-is for the declared type."""
    if declared_type is Any:
        return True
    return isinstance(declared_type, type) and isinstance(value, declared_type)


def is_uuid_type(declared_type: Any) -> bool:
    return isinstance(declared_type, type) and issubclass(declared_type, uuid.UUID)


def json_as_text(node: Any) -> str:
    """
    Render a parsed JSON value as text.

    Scalars become their JSON text (strings unquoted); objects and arrays
    have no text form and become empty.
    """
    if isinstance(node, str):
        return node
    if node is None:
        return "null"
    if isinstance(node, bool):
        return "true" if node else "false"
    if isinstance(node, (int, float)):
        return str(node)
    return ""


class _BindState:
    """Scratch state of one bind operation."""

    def __init__(self, context: RequestContext, target_type: Optional[type]):
        self.context = context
        self.target_type = target_type
        self._document: Any = _UNREAD

    def body_document(self, key: str) -> Any:
        """Read and parse the request body once; _EMPTY_BODY when there is none."""
        if self._document is _UNREAD:
            try:
                text = self.context.read_body_as_text()
                if not text or not text.strip():
                    self._document = _EMPTY_BODY
                else:
                    self._document = json.loads(text)
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                raise MalformedBodyError(key, e, self.target_type) from e
        return self._document


class AssemblyStrategy(ABC):
    @abstractmethod
    def assemble(self, plan: BindingPlan, resolve: Resolver) -> Any:
        """
        Build a target instance from resolved field values.
        """
        pass


class PositionalAssembly(AssemblyStrategy):
    """All values are resolved first, then passed to the constructor in order."""

    def assemble(self, plan: BindingPlan, resolve: Resolver) -> Any:
        values: List[Any] = [None] * len(plan.descriptors)
        for index, descriptor in enumerate(plan.descriptors):
            values[index] = resolve(descriptor)

        try:
            return plan.target_type(*values)
        except Exception as e:
            raise ConstructionError(plan.target_type, e) from e


class MutableAssembly(AssemblyStrategy):
    """Default-construct, then assign each described field."""

    def assemble(self, plan: BindingPlan, resolve: Resolver) -> Any:
        try:
            instance = plan.target_type()
        except Exception as e:
            raise ConstructionError(plan.target_type, e) from e

        # The instance stays local until every field is assigned.
        for descriptor in plan.descriptors:
            value = resolve(descriptor)
            try:
                setattr(instance, descriptor.name, value)
            except Exception as e:
                raise ConstructionError(plan.target_type, e) from e
        return instance


class RequestBinder:
    """
    Binds request data to target types described by RequestField metadata.

    Stateless: one instance is shared by all requests.
    """

    def __init__(
        self,
        conversion_service: Optional[ConversionService] = None,
        registry: Optional[BindingRegistry] = None,
    ):
        self.conversion_service = conversion_service or ConversionService()
        self.registry = registry or BindingRegistry()
        self._extractors: Dict[Source, Callable[[FieldDescriptor, _BindState], Any]] = {
            Source.HEADER: self._from_header,
            Source.PARAM: self._from_param,
            Source.PATH: self._from_path,
            Source.ATTRIBUTE: self._from_attribute,
            Source.COOKIE: self._from_cookie,
            Source.SESSION: self._from_session,
            Source.BODY: self._from_body,
            Source.MULTIPART: self._from_multipart,
        }
        self._assemblers: Dict[Shape, AssemblyStrategy] = {
            Shape.POSITIONAL: PositionalAssembly(),
            Shape.MUTABLE: MutableAssembly(),
        }

    def bind(self, target_type: Type[T], context: RequestContext) -> T:
        """
        Produce a populated instance of target_type from the request context.

        Args:
            target_type: Bindable class (positional or mutable shape)
            context: Request view to read values from

        Returns:
            The fully constructed instance

        Raises:
            BindError: first failure encountered; no partial instance escapes
        """
        plan = self.registry.plan_for(target_type)
        state = _BindState(context, target_type)
        assembler = self._assemblers[plan.shape]

        try:
            instance = assembler.assemble(plan, lambda descriptor: self._resolve(descriptor, state))
        except BindError as e:
            logger.info(
                f"Binding {type_name(target_type)} failed: {e}",
                extra={"code": e.code, "target_type": type_name(target_type)},
            )
            raise

        logger.debug(f"Bound {type_name(target_type)} from {len(plan.descriptors)} fields")
        return instance

    def resolve_value(
        self,
        descriptor: FieldDescriptor,
        context: RequestContext,
        target_type: Optional[type] = None,
    ) -> Any:
        """Extract and convert a single field value."""
        return self._resolve(descriptor, _BindState(context, target_type))

    def _resolve(self, descriptor: FieldDescriptor, state: _BindState) -> Any:
        logger.debug(
            f"Getting value for key: {descriptor.key} with type: {source_name(descriptor.source)}"
        )
        try:
            extractor = self._extractors.get(descriptor.source)
        except TypeError:
            # Unhashable source values are not categories either.
            extractor = None
        if extractor is None:
            raise UnsupportedSourceError(descriptor.source, state.target_type)

        raw_value = extractor(descriptor, state)
        if raw_value is None:
            raise MissingValueError(
                descriptor.key, descriptor.declared_type, descriptor.source, state.target_type
            )
        return self._convert(descriptor, raw_value, state)

    def _convert(self, descriptor: FieldDescriptor, raw_value: Any, state: _BindState) -> Any:
        if satisfies(raw_value, descriptor.declared_type):
            logger.debug(f"Received value for key: {descriptor.key}")
            return raw_value

        try:
            converted = self.conversion_service.convert(raw_value, descriptor.declared_type)
        except ConversionServiceError as e:
            raise ConversionError(
                descriptor.key, raw_value, descriptor.declared_type, e.cause, state.target_type
            ) from e
        logger.debug(f"Received and converted value for key: {descriptor.key}")
        return converted

    # ===========================================
    # Extractors
    # ===========================================

    def _from_header(self, descriptor: FieldDescriptor, state: _BindState) -> Any:
        return state.context.get_header(descriptor.key)

    def _from_param(self, descriptor: FieldDescriptor, state: _BindState) -> Any:
        return state.context.get_param(descriptor.key)

    def _from_path(self, descriptor: FieldDescriptor, state: _BindState) -> Any:
        path_variables = state.context.get_path_variables()
        if path_variables is None:
            return None
        return path_variables.get(descriptor.key)

    def _from_attribute(self, descriptor: FieldDescriptor, state: _BindState) -> Any:
        return state.context.get_attribute(descriptor.key)

    def _from_cookie(self, descriptor: FieldDescriptor, state: _BindState) -> Any:
        for name, value in state.context.get_cookies() or ():
            if name == descriptor.key:
                return self._cookie_value(descriptor, value, state)
        return None

    def _cookie_value(self, descriptor: FieldDescriptor, value: str, state: _BindState) -> Any:
        if not is_uuid_type(descriptor.declared_type):
            return value
        try:
            return descriptor.declared_type(value)
        except ValueError as e:
            raise ConversionError(
                descriptor.key, value, descriptor.declared_type, e, state.target_type
            ) from e

    def _from_session(self, descriptor: FieldDescriptor, state: _BindState) -> Any:
        if not state.context.has_session():
            return None
        return state.context.get_session_attribute(descriptor.key)

    def _from_body(self, descriptor: FieldDescriptor, state: _BindState) -> Any:
        if state.context.is_multipart():
            return state.context.get_multipart_param(descriptor.key)

        document = state.body_document(descriptor.key)
        if document is _EMPTY_BODY:
            return None
        if not isinstance(document, dict) or descriptor.key not in document:
            raise BodyKeyNotFoundError(descriptor.key, state.target_type)
        return json_as_text(document[descriptor.key])

    def _from_multipart(self, descriptor: FieldDescriptor, state: _BindState) -> Any:
        if not state.context.is_multipart():
            return None
        if is_file_type(descriptor.declared_type):
            return state.context.get_multipart_file(descriptor.key)
        return state.context.get_multipart_param(descriptor.key)
