"""
REST Controller Base Class

Maps HTTP verbs to controller actions, validates action input against
registered schemas, and dispatches through an explicit handler table.
"""

from __future__ import annotations

import logging
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    Union,
)

from .. import serialization
from ..config import RestConfig
from ..faults import (
    ActionNotFoundFault,
    InvalidHttpMethodFault,
    InvalidParamsFault,
    MethodNotFoundFault,
    ResultEncodingFault,
)
from ..schema import SchemaValidator
from .decorators import ACTION_METADATA_ATTR, RESOURCE
from .documentation import ApiDocumentor
from .raw import RawWrapper
from .renderers import (
    BaseRenderer,
    JSONRenderer,
    PlainTextRenderer,
    YAMLRenderer,
    build_renderer_table,
)


logger = logging.getLogger("restmap.controller")

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})

SchemaLike = Union[Mapping[str, Any], SchemaValidator, None]


class RequestAdapter(Protocol):
    """What ``invoke_with_request`` needs from the transport's request."""

    format: Optional[str]

    def params(self) -> Mapping[str, Any]:
        ...


class ResponseAdapter(Protocol):
    """What ``invoke_with_request`` needs from the transport's response."""

    def body(self, content: str) -> Any:
        ...


class RestController:
    """
    Base REST controller.

    Subclasses implement any of the standard actions and may register input
    schemas and extra actions in ``setup()`` (or with the ``@action``
    decorators):

    Resource actions (single entity):
        fetch → GET, update → PUT, delete → DELETE

    Collection actions:
        find → GET, index → GET, create → POST,
        bulk_update → PUT, delete_all → DELETE

    Each action method takes one argument, the validated parameter mapping.

    Example:
        class UsersController(RestController):

            def setup(self):
                self.register_input_schema("fetch", {
                    "id": {"type": "integer", "minimum": 1, "required": True},
                })
                self.custom_collection_handler("search", "GET")

            def fetch(self, params):
                return self.repo.get(params["id"])

            def search(self, params):
                return self.repo.search(params.get("q", ""))

        UsersController.api().invoke("fetch", {"id": 5})
        UsersController.raw().fetch({"id": 5})
    """

    # Defines the mapping between controller actions and HTTP methods
    resource_mapping: Dict[str, str] = {
        "fetch": "GET",
        "update": "PUT",
        "delete": "DELETE",
    }

    collection_mapping: Dict[str, str] = {
        "find": "GET",
        "index": "GET",
        "create": "POST",
        "bulk_update": "PUT",
        "delete_all": "DELETE",
    }

    renderer_classes: List[Any] = [JSONRenderer, YAMLRenderer, PlainTextRenderer]

    def __init__(self, *, config: Optional[RestConfig] = None):
        self.config = config or RestConfig()

        self._resource_mapping = {
            name: self._check_http_method(name, method)
            for name, method in type(self).resource_mapping.items()
        }
        self._collection_mapping = {
            name: self._check_http_method(name, method)
            for name, method in type(self).collection_mapping.items()
        }
        self._input_schemas: Dict[str, SchemaValidator] = {}
        self._output_schemas: Dict[str, SchemaValidator] = {}
        self._summaries: Dict[str, str] = {}
        self._attributes: Dict[str, str] = {}
        self._handlers: Dict[str, Callable[[Any], Any]] = {}
        self._empty_schema = SchemaValidator()
        self._renderers = build_renderer_table(
            self.renderer_classes,
            json_indent=self.config.json_indent,
            json_sort_keys=self.config.json_sort_keys,
        )

        self._apply_declared_actions()
        self.setup()
        self._refresh_dispatch_table()

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def api(cls, *args, **kwargs) -> "RestController":
        """Controller instance for the HTTP transport."""
        return cls(*args, **kwargs)

    @classmethod
    def raw(cls, *args, **kwargs) -> RawWrapper:
        """
        Controller wrapped for raw access, like from code.

        Used to hit the API locally without an HTTP request.
        """
        return RawWrapper(cls(*args, **kwargs))

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def setup(self) -> None:
        """Override to register schemas and custom handlers."""
        pass

    def register_input_schema(self, action: str, schema: SchemaLike) -> None:
        self._input_schemas[action] = self._build_validator(schema)
        logger.debug("Registered input schema for %s.%s", type(self).__name__, action)

    def register_output_schema(self, action: str, schema: SchemaLike) -> None:
        self._output_schemas[action] = self._build_validator(schema)

    def custom_resource_handler(self, action: str, http_method: str) -> None:
        """
        Hook a method as a resource handler for an HTTP method.

        Several actions may respond to the same HTTP method.
        """
        self._resource_mapping[action] = self._check_http_method(action, http_method)
        self._collection_mapping.pop(action, None)
        self._refresh_dispatch_table()

    def custom_collection_handler(self, action: str, http_method: str) -> None:
        self._collection_mapping[action] = self._check_http_method(action, http_method)
        self._resource_mapping.pop(action, None)
        self._refresh_dispatch_table()

    # alias for custom_collection_handler
    def custom_handler(self, action: str, http_method: str) -> None:
        self.custom_collection_handler(action, http_method)

    def _build_validator(self, schema: SchemaLike) -> SchemaValidator:
        if not isinstance(schema, SchemaValidator):
            schema = SchemaValidator(schema)
        return schema.bind(self.config)

    @staticmethod
    def _check_http_method(action: str, http_method: Any) -> str:
        if not isinstance(http_method, str) or http_method.upper() not in HTTP_METHODS:
            raise InvalidHttpMethodFault(action, http_method)
        return http_method.upper()

    def _apply_declared_actions(self) -> None:
        """Register actions declared with the ``@action`` decorators."""
        cls = type(self)
        seen = set()
        for klass in reversed(cls.__mro__):
            for attribute in vars(klass):
                if attribute in seen:
                    continue
                seen.add(attribute)
                meta = getattr(getattr(cls, attribute, None), ACTION_METADATA_ATTR, None)
                if not meta:
                    continue

                name = meta["action"]
                self._attributes[name] = meta["attribute"]
                if meta["scope"] == RESOURCE:
                    self.custom_resource_handler(name, meta["http_method"])
                else:
                    self.custom_collection_handler(name, meta["http_method"])
                if meta["input_schema"] is not None:
                    self.register_input_schema(name, meta["input_schema"])
                if meta["output_schema"] is not None:
                    self.register_output_schema(name, meta["output_schema"])
                if meta["summary"]:
                    self._summaries[name] = meta["summary"]

    def _resolve_handler(self, action: str) -> Optional[Callable[[Any], Any]]:
        attribute = self._attributes.get(action, action)
        if not attribute.isidentifier() or attribute.startswith("_"):
            return None
        owner = next((klass for klass in type(self).__mro__ if attribute in vars(klass)), None)
        # The controller's own API is never an action
        if owner is None or owner is RestController or owner is object:
            return None
        if not callable(getattr(type(self), attribute)):
            return None
        return getattr(self, attribute)

    def _refresh_dispatch_table(self) -> None:
        handlers = {}
        for action in self.method_mapping():
            handler = self._resolve_handler(action)
            if handler is not None:
                handlers[action] = handler
        self._handlers = handlers
        logger.debug("Dispatch table for %s: %s", type(self).__name__, list(handlers))

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def responds_to(self, action: str) -> bool:
        """
        Whether an action by that name exists and responds to HTTP requests.

        Methods that would not respond to an HTTP request return False even
        if they exist on the object.
        """
        return action in self._handlers

    def action_for(self, action: str) -> str:
        """Return the HTTP method this action responds to."""
        mapping = self.method_mapping()
        if action not in mapping:
            raise ActionNotFoundFault(action, type(self).__name__)
        return mapping[action]

    def method_mapping(self) -> Dict[str, str]:
        """Full mapping of actions to HTTP methods; collection entries win."""
        return {**self._resource_mapping, **self._collection_mapping}

    def get_resource_methods(self) -> List[str]:
        return [name for name in self._resource_mapping if name in self._handlers]

    def get_collection_methods(self) -> List[str]:
        return [name for name in self._collection_mapping if name in self._handlers]

    def input_schema_for(self, action: str) -> SchemaValidator:
        return self._input_schemas.get(action, self._empty_schema)

    def output_schema_for(self, action: str) -> SchemaValidator:
        return self._output_schemas.get(action, self._empty_schema)

    def summary_for(self, action: str) -> str:
        """Declared summary, else the first line of the handler docstring."""
        if action in self._summaries:
            return self._summaries[action]
        handler = self._handlers.get(action)
        doc = (getattr(handler, "__doc__", None) or "").strip()
        return doc.splitlines()[0] if doc else ""

    def get_documentation(self) -> ApiDocumentor:
        return ApiDocumentor(self)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def invoke(self, action: str, params: Any = None) -> Any:
        """
        Validate ``params`` with the action's input schema, then call it.

        Call this to filter the input through the registered schema.

        Raises:
            ActionNotFoundFault: action is not mapped or not implemented
            InvalidParamsFault: params rejected by the schema
        """
        handler = self._handlers.get(action)
        if handler is None:
            raise ActionNotFoundFault(action, type(self).__name__)

        validated = self.input_schema_for(action).validate(
            {} if params is None else params,
            action=action,
        )
        try:
            normalized = serialization.canonicalize(validated)
        except (TypeError, ValueError) as exc:
            raise InvalidParamsFault(
                [f"Parameters are not JSON-representable: {exc}"],
                action=action,
            ) from exc

        logger.debug("Invoking %s.%s", type(self).__name__, action)
        return handler(normalized)

    def invoke_with_request(
        self,
        action: str,
        request: RequestAdapter,
        response: ResponseAdapter,
    ) -> None:
        """Run an action for the HTTP transport and write the response body."""
        result = self.invoke(action, request.params())
        body = self.format_response(action, result, getattr(request, "format", None))
        response.body(body)

    def renderer_for(self, format: Optional[str]) -> BaseRenderer:
        """Renderer for a format suffix; unknown formats get the default."""
        key = (format or self.config.default_format).lower().lstrip(".")
        if key in self._renderers:
            return self._renderers[key]
        if self.config.default_format in self._renderers:
            return self._renderers[self.config.default_format]
        return next(iter(self._renderers.values()))

    def format_response(self, action: str, result: Any, format: Optional[str] = None) -> str:
        """
        Serialize an action result for an HTTP response.

        Override in a subclass for different formats.
        """
        try:
            return self.renderer_for(format).render(result)
        except (TypeError, ValueError) as exc:
            raise ResultEncodingFault(action, str(exc)) from exc

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(
                f"'{type(self).__name__}' object has no attribute '{name}'"
            )
        raise MethodNotFoundFault(name, type(self).__name__)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} actions={list(self._handlers)}>"
