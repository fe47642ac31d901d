"""
Runtimedist Faults - Domain-specific fault types.

Provides concrete fault classes for each domain:
- CONFIG faults
- ARTIFACTS faults
- STORAGE faults
- RENDER / IO faults
- SYSTEM faults
"""

from typing import Any, Optional
from .core import Fault, FaultDomain, Severity


# ============================================================================
# CONFIG Faults
# ============================================================================

class ConfigFault(Fault):
    """Base class for configuration faults."""

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
            retryable=False,
            metadata=metadata,
        )


class ConfigMissingFault(ConfigFault):
    """Required configuration is missing."""

    def __init__(self, key: str, **kwargs):
        super().__init__(
            code="CONFIG_MISSING",
            message=f"Required configuration key '{key}' is missing",
            metadata={"key": key, **kwargs.get("metadata", {})},
        )


class ConfigInvalidFault(ConfigFault):
    """Configuration value is invalid."""

    def __init__(self, key: str, reason: str, **kwargs):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Configuration key '{key}' is invalid: {reason}",
            metadata={"key": key, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# ARTIFACTS Faults
# ============================================================================

class ArtifactsDocumentFault(Fault):
    """An artifact document could not be parsed."""

    def __init__(self, reason: str, **kwargs):
        super().__init__(
            code="ARTIFACTS_DOCUMENT_INVALID",
            message=f"Invalid artifacts document: {reason}",
            domain=FaultDomain.ARTIFACTS,
            metadata={"reason": reason, **kwargs.get("metadata", {})},
        )


class ReleaseLoadFault(Fault):
    """Loading the release snapshot was aborted."""

    def __init__(self, release_tag: str, reason: str, **kwargs):
        super().__init__(
            code="RELEASE_LOAD_FAILED",
            message=f"Failed to load release '{release_tag}': {reason}",
            domain=FaultDomain.ARTIFACTS,
            severity=Severity.FATAL,
            metadata={"release_tag": release_tag, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# STORAGE Faults
# ============================================================================

class ReleaseStoreFault(Fault):
    """Release storage backend failed."""

    def __init__(self, operation: str, reason: str, **kwargs):
        super().__init__(
            code="RELEASE_STORE_ERROR",
            message=f"Release store {operation} failed: {reason}",
            domain=FaultDomain.STORAGE,
            metadata={"operation": operation, "reason": reason, **kwargs.get("metadata", {})},
        )


class ReleaseExistsFault(Fault):
    """A release with the same tag was already recorded."""

    def __init__(self, release_tag: str, **kwargs):
        super().__init__(
            code="RELEASE_EXISTS",
            message=f"Release '{release_tag}' already exists",
            domain=FaultDomain.STORAGE,
            metadata={"release_tag": release_tag, **kwargs.get("metadata", {})},
        )


class PublishFault(Fault):
    """The release-hosting client failed while publishing."""

    def __init__(self, step: str, reason: str, **kwargs):
        super().__init__(
            code="PUBLISH_FAILED",
            message=f"Publishing failed during {step}: {reason}",
            domain=FaultDomain.STORAGE,
            retryable=True,
            metadata={"step": step, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# RENDER / IO Faults
# ============================================================================

class OutputDirectoryFault(Fault):
    """An output directory could not be created."""

    def __init__(self, path: str, reason: str, **kwargs):
        super().__init__(
            code="OUTPUT_DIRECTORY_FAILED",
            message=f"Cannot create output directory '{path}': {reason}",
            domain=FaultDomain.IO,
            severity=Severity.FATAL,
            retryable=False,
            metadata={"path": path, "reason": reason, **kwargs.get("metadata", {})},
        )


class SiteWriteFault(Fault):
    """A rendered file could not be written."""

    def __init__(self, path: str, reason: str, **kwargs):
        super().__init__(
            code="SITE_WRITE_FAILED",
            message=f"Cannot write '{path}': {reason}",
            domain=FaultDomain.IO,
            metadata={"path": path, "reason": reason, **kwargs.get("metadata", {})},
        )


class RenderFault(Fault):
    """A renderer stage failed."""

    def __init__(self, stage: str, reason: str, **kwargs):
        self.stage = stage
        super().__init__(
            code="RENDER_FAILED",
            message=f"Rendering {stage} pages failed: {reason}",
            domain=FaultDomain.RENDER,
            metadata={"stage": stage, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# SYSTEM Faults
# ============================================================================

class GenerationCancelledFault(Fault):
    """Site generation observed a cancellation request."""

    def __init__(self, phase: str, **kwargs):
        super().__init__(
            code="GENERATION_CANCELLED",
            message=f"Site generation cancelled before {phase}",
            domain=FaultDomain.SYSTEM,
            severity=Severity.WARN,
            metadata={"phase": phase, **kwargs.get("metadata", {})},
        )
