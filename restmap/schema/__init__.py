"""
restmap schema - input/output schemas for controller actions.
"""

from .validator import SchemaValidator, normalize_schema
from .pagination import Pagination, pagination_schema

__all__ = [
    "SchemaValidator",
    "normalize_schema",
    "Pagination",
    "pagination_schema",
]
