"""
restmap faults - Domain-specific fault types.

Concrete faults also derive from the builtin exception a plain Python
caller would expect (``ValueError`` for rejected input, ``LookupError`` for
unknown actions, ``AttributeError`` for missing methods), so they can be
caught without importing restmap.
"""

from typing import Any, Optional, Sequence

from .core import Fault, FaultDomain, Severity


# ============================================================================
# CONFIG Faults
# ============================================================================

class ConfigFault(Fault):
    """Base class for controller configuration faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.FATAL,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.CONFIG,
            severity=severity,
            public=False,
            metadata=metadata,
        )


class SchemaDefinitionFault(ConfigFault):
    """A registered schema is not a valid JSON schema."""

    def __init__(self, reason: str, **kwargs):
        super().__init__(
            code="SCHEMA_INVALID",
            message=f"Schema definition is invalid: {reason}",
            metadata={"reason": reason, **kwargs.get("metadata", {})},
        )


class InvalidHttpMethodFault(ConfigFault):
    """A handler was registered for an unknown HTTP method."""

    def __init__(self, action: str, http_method: Any, **kwargs):
        super().__init__(
            code="INVALID_HTTP_METHOD",
            message=f"Cannot map action '{action}' to unknown HTTP method {http_method!r}",
            metadata={"action": action, "http_method": http_method, **kwargs.get("metadata", {})},
        )


# ============================================================================
# SCHEMA Faults
# ============================================================================

class InvalidParamsFault(Fault, ValueError):
    """
    Request parameters do not conform to the action's input schema.

    ``message`` is the first violation; ``errors`` holds all of them.
    """

    def __init__(self, errors: Sequence[str], *, action: Optional[str] = None, **kwargs):
        self.errors = list(errors) or ["Invalid parameters"]
        super().__init__(
            code="INVALID_PARAMS",
            message=self.errors[0],
            domain=FaultDomain.SCHEMA,
            metadata={"errors": self.errors, "action": action, **kwargs.get("metadata", {})},
        )


# ============================================================================
# ROUTING Faults
# ============================================================================

class RoutingFault(Fault):
    """Base class for action and method lookup faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.ROUTING,
            metadata=metadata,
        )


class ActionNotFoundFault(RoutingFault, LookupError):
    """Action is not mapped, or mapped but not implemented."""

    def __init__(self, action: str, controller: Optional[str] = None, **kwargs):
        super().__init__(
            code="ACTION_NOT_FOUND",
            message=f"Action '{action}' is not available" + (f" on {controller}" if controller else ""),
            metadata={"action": action, "controller": controller, **kwargs.get("metadata", {})},
        )


class MethodNotFoundFault(RoutingFault, AttributeError):
    """Method does not exist on the controller (bad method call)."""

    def __init__(self, method: str, controller: Optional[str] = None, **kwargs):
        super().__init__(
            code="METHOD_NOT_FOUND",
            message=f"Method '{method}' does not exist" + (f" on {controller}" if controller else ""),
            metadata={"method": method, "controller": controller, **kwargs.get("metadata", {})},
        )


# ============================================================================
# FLOW Faults
# ============================================================================

class ResultEncodingFault(Fault, TypeError):
    """Handler returned a value that cannot be canonicalized as JSON."""

    def __init__(self, action: str, reason: str, **kwargs):
        super().__init__(
            code="RESULT_NOT_SERIALIZABLE",
            message=f"Result of action '{action}' is not JSON-serializable: {reason}",
            domain=FaultDomain.FLOW,
            metadata={"action": action, "reason": reason, **kwargs.get("metadata", {})},
        )
