"""
restmap - REST controller base with schema-validated dispatch.

Controllers map HTTP verbs to actions, validate action input with JSON
schemas, and run either behind an HTTP transport or in-process through a
raw wrapper.
"""

__version__ = "0.1.0"

from .config import ConfigError, ConfigLoader, RestConfig, configure_logging
from .controller import (
    ApiDocumentor,
    RawWrapper,
    RestController,
    action,
    collection_action,
    resource_action,
)
from .faults import (
    ActionNotFoundFault,
    Fault,
    FaultResponseMapper,
    InvalidParamsFault,
    MethodNotFoundFault,
)
from .schema import Pagination, SchemaValidator

__all__ = [
    "__version__",
    # Config
    "ConfigError",
    "ConfigLoader",
    "RestConfig",
    "configure_logging",
    # Controller
    "ApiDocumentor",
    "RawWrapper",
    "RestController",
    "action",
    "collection_action",
    "resource_action",
    # Faults
    "ActionNotFoundFault",
    "Fault",
    "FaultResponseMapper",
    "InvalidParamsFault",
    "MethodNotFoundFault",
    # Schema
    "Pagination",
    "SchemaValidator",
]
