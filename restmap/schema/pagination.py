"""
Pagination input schema.

Register on any collection action that returns a slice of a larger set::

    class ProductsController(RestController):
        def setup(self):
            self.register_input_schema("find", Pagination(size=50))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from .validator import SchemaValidator

if TYPE_CHECKING:
    from ..config import RestConfig


__all__ = ["DEFAULT_PAGE_SIZE", "Pagination", "pagination_schema"]

DEFAULT_PAGE_SIZE = 100


def pagination_schema(size: int = DEFAULT_PAGE_SIZE) -> Dict[str, Any]:
    """Schema for limit/offset and page-number slicing, capped at ``size``."""
    return {
        "type": "object",
        "description": "Request a slice of the final data set.",
        "properties": {
            "limit": {
                "type": "integer",
                "description": "The number of items to fetch.",
                "default": 20,
                "minimum": 1,
                "maximum": size,
            },
            "offset": {
                "type": "integer",
                "description": "Start with this item. 0-based.",
                "default": 0,
                "minimum": 0,
            },
            "page_number": {
                "type": "integer",
                "description": "The page",
                "default": 1,
                "minimum": 1,
            },
            "page_size": {
                "type": "integer",
                "description": "The number of items to fetch per page.",
                "default": size,
                "minimum": 1,
            },
        },
    }


class Pagination(SchemaValidator):
    """
    SchemaValidator preloaded with :func:`pagination_schema`.

    Without an explicit ``size`` the cap is ``DEFAULT_PAGE_SIZE`` on its own
    and the controller's ``RestConfig.pagination_size`` once registered.
    """

    def __init__(self, size: Optional[int] = None, **kwargs):
        self._size_given = size is not None
        self.size = size if size is not None else DEFAULT_PAGE_SIZE
        super().__init__(pagination_schema(self.size), **kwargs)

    def bind(self, config: "RestConfig") -> "Pagination":
        if self._size_given:
            return super().bind(config)
        sized = Pagination(
            config.pagination_size,
            coerce=self._coerce,
            strip_unknown=self._strip_unknown,
        )
        return sized.bind(config)

    def window(self, params: Dict[str, Any]) -> tuple[int, int]:
        """
        Return ``(offset, limit)`` for already-validated params.

        An explicit ``page_number`` greater than 1 takes precedence over
        ``offset``.
        """
        page_number = params.get("page_number", 1)
        if page_number > 1:
            page_size = params.get("page_size", self.size)
            return (page_number - 1) * page_size, page_size
        return params.get("offset", 0), params.get("limit", 20)
