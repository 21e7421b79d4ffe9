"""
Response renderers.

``RestController.format_response`` picks a renderer by the request's
format suffix:

- **JSONRenderer**: ``json`` (default)
- **YAMLRenderer**: ``yaml``
- **PlainTextRenderer**: ``text``

Add formats by listing more renderer classes on the controller::

    class ReportsController(RestController):
        renderer_classes = [JSONRenderer, CSVRenderer]
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import yaml

from .. import serialization


__all__ = [
    "BaseRenderer",
    "JSONRenderer",
    "YAMLRenderer",
    "PlainTextRenderer",
    "build_renderer_table",
]


class BaseRenderer:
    """
    Abstract renderer.

    Subclass and set ``media_type`` and ``format_suffix``, and implement
    ``render()``.
    """

    media_type: str = "application/octet-stream"
    format_suffix: str = ""

    def render(self, data: Any) -> str:
        raise NotImplementedError


class JSONRenderer(BaseRenderer):
    media_type = "application/json"
    format_suffix = "json"

    def __init__(self, *, indent: Optional[int] = None, sort_keys: bool = False):
        self.indent = indent
        self.sort_keys = sort_keys

    def render(self, data: Any) -> str:
        return serialization.dumps(data, indent=self.indent, sort_keys=self.sort_keys)


class YAMLRenderer(BaseRenderer):
    media_type = "application/x-yaml"
    format_suffix = "yaml"

    def render(self, data: Any) -> str:
        # Canonicalize first so tuples, dates and the like dump as plain YAML
        return yaml.safe_dump(
            serialization.canonicalize(data),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )


class PlainTextRenderer(BaseRenderer):
    media_type = "text/plain"
    format_suffix = "text"

    def render(self, data: Any) -> str:
        if data is None:
            return ""
        if isinstance(data, (dict, list, tuple)):
            return serialization.dumps(data, indent=2)
        return str(data)


def build_renderer_table(
    renderer_classes: Iterable[type],
    *,
    json_indent: Optional[int] = None,
    json_sort_keys: bool = False,
) -> Dict[str, BaseRenderer]:
    """Instantiate renderers keyed by format suffix, keeping list order."""
    table: Dict[str, BaseRenderer] = {}
    for renderer_class in renderer_classes:
        if isinstance(renderer_class, BaseRenderer):
            renderer = renderer_class
        elif issubclass(renderer_class, JSONRenderer):
            renderer = renderer_class(indent=json_indent, sort_keys=json_sort_keys)
        else:
            renderer = renderer_class()
        table.setdefault(renderer.format_suffix, renderer)
    return table
