"""
Tests for the fault taxonomy.
"""

from __future__ import annotations

import pytest

from runtimedist.faults import (
    ConfigInvalidFault,
    ConfigMissingFault,
    Fault,
    FaultDomain,
    GenerationCancelledFault,
    OutputDirectoryFault,
    ReleaseLoadFault,
    RenderFault,
    Severity,
    SiteWriteFault,
)


class TestFault:
    def test_str_includes_code(self):
        fault = Fault(code="X", message="boom", domain=FaultDomain.SYSTEM)
        assert str(fault) == "[X] boom"

    def test_requires_code_message_domain(self):
        with pytest.raises(TypeError):
            Fault(code="X", message="boom")

    def test_domain_defaults(self):
        fault = SiteWriteFault("/site/index.html", "disk full")
        assert fault.domain == FaultDomain.IO
        assert fault.retryable is True
        assert fault.severity is Severity.ERROR

    def test_explicit_severity_beats_domain_default(self):
        fault = OutputDirectoryFault("/site", "read-only")
        assert fault.domain == FaultDomain.IO
        assert fault.retryable is False
        assert fault.severity is Severity.FATAL

    def test_to_dict(self):
        d = ReleaseLoadFault("nodejs-v1", "bad JSON").to_dict()
        assert d["code"] == "RELEASE_LOAD_FAILED"
        assert d["domain"] == "artifacts"
        assert d["severity"] == "fatal"
        assert d["metadata"] == {"release_tag": "nodejs-v1", "reason": "bad JSON"}


class TestDomainFaults:
    def test_config_faults_share_base(self):
        assert ConfigMissingFault("x").domain == FaultDomain.CONFIG
        assert ConfigInvalidFault("x", "y").code == "CONFIG_INVALID"

    def test_extra_metadata_merged(self):
        fault = ConfigMissingFault("config", metadata={"path": "/etc/rtd.yaml"})
        assert fault.metadata == {"key": "config", "path": "/etc/rtd.yaml"}

    def test_render_fault_stage(self):
        fault = RenderFault("simple", "template missing")
        assert fault.stage == "simple"
        assert "simple" in fault.message

    def test_cancel_is_a_warning(self):
        fault = GenerationCancelledFault("load")
        assert fault.severity is Severity.WARN
        assert isinstance(fault, Exception)

    def test_domain_equality(self):
        assert FaultDomain.RENDER == "render"
        assert hash(FaultDomain("io")) == hash(FaultDomain.IO)
