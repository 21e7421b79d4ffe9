"""
restmap controller system

A RestController maps actions to HTTP methods, validates input against
registered schemas, and can be driven by an HTTP transport
(``invoke_with_request``) or called in-process through ``Controller.raw()``.

Example:
    from restmap import RestController

    class UsersController(RestController):

        def setup(self):
            self.register_input_schema("fetch", {"id": {"type": "integer", "min": 1}})

        def fetch(self, params):
            return {"id": params["id"]}

        def find(self, params):
            return []

    UsersController.api().action_for("fetch")   # "GET"
    UsersController.raw().fetch({"id": 5})       # {"id": 5}
"""

from .base import (
    HTTP_METHODS,
    RequestAdapter,
    ResponseAdapter,
    RestController,
)
from .decorators import (
    COLLECTION,
    RESOURCE,
    ActionDecorator,
    action,
    collection_action,
    resource_action,
)
from .documentation import ApiDocumentor
from .raw import RawWrapper
from .renderers import (
    BaseRenderer,
    JSONRenderer,
    PlainTextRenderer,
    YAMLRenderer,
)

__all__ = [
    # Base
    "HTTP_METHODS",
    "RequestAdapter",
    "ResponseAdapter",
    "RestController",

    # Decorators
    "COLLECTION",
    "RESOURCE",
    "ActionDecorator",
    "action",
    "collection_action",
    "resource_action",

    # Raw access & docs
    "RawWrapper",
    "ApiDocumentor",

    # Renderers
    "BaseRenderer",
    "JSONRenderer",
    "PlainTextRenderer",
    "YAMLRenderer",
]
