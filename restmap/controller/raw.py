"""
Raw (in-process) access to a controller.

``Controller.raw()`` returns a RawWrapper. Mapped actions called through it
are still validated against their input schema, and their results come
back in canonical JSON shape, exactly as an HTTP client would see them.
Anything else is forwarded to the controller untouched.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, List

from .. import serialization
from ..faults import MethodNotFoundFault, ResultEncodingFault


logger = logging.getLogger("restmap.controller.raw")


class RawWrapper:
    """
    Wrap a controller for direct calls from code.

    Example:
        users = UsersController.raw()
        users.fetch({"id": 5})       # validated, canonical result
        users.responds_to("fetch")   # not an action, forwarded as-is
    """

    def __init__(self, controller: Any):
        self._controller = controller

    @property
    def controller(self) -> Any:
        return self._controller

    def get_collection_methods(self) -> List[str]:
        return self._controller.get_collection_methods()

    def get_resource_methods(self) -> List[str]:
        return self._controller.get_resource_methods()

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(
                f"'{type(self).__name__}' object has no attribute '{name}'"
            )

        controller = self._controller
        if controller.responds_to(name):
            return self._validated_call(name)

        target = getattr(controller, name, None)
        if target is None or not callable(target):
            raise MethodNotFoundFault(name, type(controller).__name__)
        return target

    def _validated_call(self, action: str) -> Callable[..., Any]:
        controller = self._controller
        handler = getattr(type(controller), action, None)

        def call(params: Any = None) -> Any:
            logger.debug("Raw call %s.%s", type(controller).__name__, action)
            result = controller.invoke(action, params)
            try:
                return serialization.canonicalize(result)
            except (TypeError, ValueError) as exc:
                raise ResultEncodingFault(action, str(exc)) from exc

        if callable(handler):
            functools.update_wrapper(call, handler)
        else:
            call.__name__ = action
        return call

    def __repr__(self) -> str:
        return f"RawWrapper({self._controller!r})"
