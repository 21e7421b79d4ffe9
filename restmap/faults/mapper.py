"""
Fault → HTTP response mapping.

Controllers never pick status codes themselves; transports that catch a
fault use this mapper to build the client-facing error.
"""

import logging
from typing import Any, Dict

from .core import Fault, FaultDomain, Severity


logger = logging.getLogger("restmap.faults")

_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
}


class FaultResponseMapper:
    """
    Map faults to HTTP status codes and error bodies.

    Maps fault domains to status codes:
    - SCHEMA → 400 Bad Request
    - ROUTING → 404 Not Found
    - CONFIG → 500 Internal Server Error
    - FLOW → 500 Internal Server Error

    Usage:
        ```python
        mapper = FaultResponseMapper()
        try:
            controller.invoke_with_request(action, request, response)
        except Fault as fault:
            response.status(mapper.status_for(fault))
            response.body(json.dumps(mapper.to_body(fault)))
        ```
    """

    def __init__(self, status_map: Dict[FaultDomain, int] | None = None):
        self.status_map = {
            FaultDomain.SCHEMA: 400,
            FaultDomain.ROUTING: 404,
            FaultDomain.CONFIG: 500,
            FaultDomain.FLOW: 500,
        }
        if status_map:
            self.status_map.update(status_map)

    def status_for(self, fault: Fault) -> int:
        return self.status_map.get(fault.domain, 500)

    def to_body(self, fault: Fault) -> Dict[str, Any]:
        """Build the error body; private faults have their message masked."""
        body: Dict[str, Any] = {
            "error": {
                "code": fault.code,
                "message": fault.message if fault.public else "Internal server error",
                "domain": fault.domain.value,
            }
        }
        errors = fault.metadata.get("errors")
        if fault.public and errors:
            body["error"]["errors"] = list(errors)
        return body

    def report(self, fault: Fault) -> None:
        """Log the fault at the level matching its severity."""
        logger.log(_LOG_LEVELS.get(fault.severity, logging.ERROR), "%s", fault)
