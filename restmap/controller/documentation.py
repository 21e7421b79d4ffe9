"""
API documentation for a controller.

Built from the controller's mapping and schema tables, so it always matches
what ``invoke`` will accept.
"""

from __future__ import annotations

import inspect
from typing import Any, Dict, List

import yaml

from .. import serialization


class ApiDocumentor:
    """
    Structured description of a controller's actions.

    ``to_dict()`` returns::

        {
            "controller": "UsersController",
            "description": "...",
            "actions": [
                {"name": "fetch", "scope": "resource", "http_method": "GET",
                 "summary": "...", "input_schema": {...}, "output_schema": {...}},
                ...
            ],
        }

    Resource actions are listed first, then collection actions, each in
    mapping order. Only implemented actions appear.
    """

    def __init__(self, controller: Any):
        self.controller = controller

    def actions(self) -> List[Dict[str, Any]]:
        controller = self.controller
        mapping = controller.method_mapping()
        entries = []
        for scope, names in (
            ("resource", controller.get_resource_methods()),
            ("collection", controller.get_collection_methods()),
        ):
            for name in names:
                entries.append({
                    "name": name,
                    "scope": scope,
                    "http_method": mapping[name],
                    "summary": controller.summary_for(name),
                    "input_schema": controller.input_schema_for(name).describe(),
                    "output_schema": controller.output_schema_for(name).describe(),
                })
        return entries

    def to_dict(self) -> Dict[str, Any]:
        cls = type(self.controller)
        doc = inspect.getdoc(cls) if cls.__doc__ else ""
        return {
            "controller": cls.__name__,
            "description": doc.splitlines()[0] if doc else "",
            "actions": self.actions(),
        }

    def to_json(self, indent: int = 2) -> str:
        return serialization.dumps(self.to_dict(), indent=indent)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)
