"""
Runtimedist Faults - typed fault signals.

Every failure the pipeline reports is a ``Fault``: a stable code, a
message, a domain and a severity. Degraded-but-successful outcomes
(unparsable sub-versions, unclassifiable filenames) are results, not
faults.
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
)

from .domains import (
    ConfigFault,
    ConfigMissingFault,
    ConfigInvalidFault,
    ArtifactsDocumentFault,
    ReleaseLoadFault,
    ReleaseStoreFault,
    ReleaseExistsFault,
    PublishFault,
    OutputDirectoryFault,
    SiteWriteFault,
    RenderFault,
    GenerationCancelledFault,
)

__all__ = [
    # Core types
    "Fault",
    "FaultDomain",
    "Severity",

    # Domain faults
    "ConfigFault",
    "ConfigMissingFault",
    "ConfigInvalidFault",
    "ArtifactsDocumentFault",
    "ReleaseLoadFault",
    "ReleaseStoreFault",
    "ReleaseExistsFault",
    "PublishFault",
    "OutputDirectoryFault",
    "SiteWriteFault",
    "RenderFault",
    "GenerationCancelledFault",
]
