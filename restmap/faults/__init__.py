"""
restmap faults - typed fault signals.

Every error raised by restmap is a Fault: it carries a stable code, a
domain and a public flag, and a FaultResponseMapper turns it into an HTTP
status and error body for the transport.

Core exports:
- Fault: Base fault class
- FaultDomain: Domain taxonomy
- Severity: Severity levels
- FaultResponseMapper: Fault → status/body mapping
"""

from .core import (
    DOMAIN_DEFAULTS,
    Fault,
    FaultDomain,
    Severity,
)

from .domains import (
    ConfigFault,
    SchemaDefinitionFault,
    InvalidHttpMethodFault,
    InvalidParamsFault,
    RoutingFault,
    ActionNotFoundFault,
    MethodNotFoundFault,
    ResultEncodingFault,
)

from .mapper import FaultResponseMapper

__all__ = [
    # Core types
    "DOMAIN_DEFAULTS",
    "Fault",
    "FaultDomain",
    "Severity",

    # Domain faults
    "ConfigFault",
    "SchemaDefinitionFault",
    "InvalidHttpMethodFault",
    "InvalidParamsFault",
    "RoutingFault",
    "ActionNotFoundFault",
    "MethodNotFoundFault",
    "ResultEncodingFault",

    # Mapping
    "FaultResponseMapper",
]
