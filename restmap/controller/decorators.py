"""
Controller action decorators.

Declarative form of the registration calls on RestController. Metadata is
attached to the function and read once when the controller is constructed.

    class UsersController(RestController):

        @resource_action("GET", input_schema={"id": {"type": "integer", "min": 1}})
        def fetch(self, params):
            ...

        @collection_action("POST")
        def import_csv(self, params):
            ...
"""

from typing import Any, Callable, Mapping, Optional, TypeVar


F = TypeVar("F", bound=Callable[..., Any])

RESOURCE = "resource"
COLLECTION = "collection"

ACTION_METADATA_ATTR = "__rest_action__"


class ActionDecorator:
    """
    Attach action metadata to a controller method.

    Args:
        http_method: HTTP method the action responds to
        scope: "resource" (single entity) or "collection"
        name: Action name; defaults to the method name
        input_schema: Schema registered for the action's input
        output_schema: Schema registered for the action's output
        summary: One-line description for documentation
    """

    def __init__(
        self,
        http_method: str,
        *,
        scope: str = COLLECTION,
        name: Optional[str] = None,
        input_schema: Optional[Mapping[str, Any]] = None,
        output_schema: Optional[Mapping[str, Any]] = None,
        summary: Optional[str] = None,
    ):
        if scope not in (RESOURCE, COLLECTION):
            raise ValueError(f"scope must be '{RESOURCE}' or '{COLLECTION}', got {scope!r}")
        self.http_method = http_method
        self.scope = scope
        self.name = name
        self.input_schema = input_schema
        self.output_schema = output_schema
        self.summary = summary

    def __call__(self, func: F) -> F:
        setattr(func, ACTION_METADATA_ATTR, {
            "action": self.name or func.__name__,
            "attribute": func.__name__,
            "http_method": self.http_method,
            "scope": self.scope,
            "input_schema": self.input_schema,
            "output_schema": self.output_schema,
            "summary": self.summary,
        })
        return func


def action(http_method: str, **kwargs) -> ActionDecorator:
    return ActionDecorator(http_method, **kwargs)


def resource_action(http_method: str, **kwargs) -> ActionDecorator:
    return ActionDecorator(http_method, scope=RESOURCE, **kwargs)


def collection_action(http_method: str, **kwargs) -> ActionDecorator:
    return ActionDecorator(http_method, scope=COLLECTION, **kwargs)
