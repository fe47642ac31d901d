"""
Runtimedist Faults - Core types and fault taxonomy.

A fault is an exception that also carries enough structure for the CLI to
report it and for tests to assert on it: a stable ``code``, the domain it
belongs to, a severity and the metadata describing the failing input.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Severity(str, Enum):
    """How far a fault propagates."""

    INFO = "info"
    WARN = "warn"       # run stopped on request, nothing is broken
    ERROR = "error"     # current phase fails
    FATAL = "fatal"     # whole run aborts, no partial output


@dataclass(frozen=True, eq=False)
class FaultDomain:
    """
    Functional area a fault belongs to.

    Compares equal to its own name so callers can write
    ``fault.domain == "render"``.
    """

    name: str
    description: str = ""

    @property
    def value(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.name

    def __eq__(self, other: Any) -> bool:
        other_name = other.name if isinstance(other, FaultDomain) else other
        return self.name == other_name

    def __hash__(self) -> int:
        return hash(self.name)


FaultDomain.CONFIG = FaultDomain("config", "Configuration sources and validation")
FaultDomain.ARTIFACTS = FaultDomain("artifacts", "Artifacts documents and release loading")
FaultDomain.STORAGE = FaultDomain("storage", "Release row persistence")
FaultDomain.RENDER = FaultDomain("render", "Page rendering")
FaultDomain.IO = FaultDomain("io", "Output directories and files")
FaultDomain.SYSTEM = FaultDomain("system", "Run control")

# domain name -> (severity, retryable) used when a fault does not say
_DEFAULTS: Dict[str, Tuple[Severity, bool]] = {
    "config": (Severity.FATAL, False),
    "artifacts": (Severity.FATAL, False),
    "storage": (Severity.ERROR, False),
    "render": (Severity.ERROR, False),
    "io": (Severity.ERROR, True),
    "system": (Severity.FATAL, False),
}


class Fault(Exception):
    """
    Base class for every failure the pipeline reports.

    Example:
        ```python
        raise Fault(
            code="RELEASE_LOAD_FAILED",
            message="artifacts JSON for nodejs-v22.15.0 is malformed",
            domain=FaultDomain.ARTIFACTS,
        )
        ```

    ``code``, ``message`` and ``domain`` are required; severity and retry
    semantics fall back to the domain's defaults.
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        domain: FaultDomain,
        severity: Optional[Severity] = None,
        retryable: Optional[bool] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.domain = domain

        default_severity, default_retryable = _DEFAULTS.get(domain.name, (Severity.ERROR, False))
        self.severity = severity if severity is not None else default_severity
        self.retryable = default_retryable if retryable is None else retryable
        self.metadata: Dict[str, Any] = dict(metadata or {})

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, domain={self.domain}, severity={self.severity.value})"

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data form for ``--json-output`` and structured logs."""
        return dict(
            code=self.code,
            message=self.message,
            domain=str(self.domain),
            severity=self.severity.value,
            retryable=self.retryable,
            metadata=dict(self.metadata),
        )
