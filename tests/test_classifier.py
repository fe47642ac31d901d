"""
Tests for the artifact classifier.

Covers:
- Checksum markers → common files
- Authoritative matches against download records (binaries and sidecars)
- Filename heuristic fallback
- Unknown files degrade instead of raising
"""

from __future__ import annotations

import pytest

from runtimedist.artifacts import (
    DownloadRecord,
    FileKind,
    Resolution,
    classify_file,
    extract_version_from_filename,
    kind_from_suffix,
)


# ════════════════════════════════════════════════════════════════════════
# Common files
# ════════════════════════════════════════════════════════════════════════


class TestChecksumFiles:
    @pytest.mark.parametrize("filename", ["SHASUMS256.txt", "checksums.txt", "node-SHASUMS.txt"])
    def test_checksum_marker(self, filename):
        info = classify_file(filename)
        assert info.kind is FileKind.CHECKSUM
        assert info.resolution is Resolution.COMMON
        assert info.is_common
        assert info.os == ""

    @pytest.mark.parametrize("filename", ["SHASUMS256.txt.sig", "SHASUMS256.txt.asc"])
    def test_checksum_signature(self, filename):
        info = classify_file(filename)
        assert info.kind is FileKind.CHECKSUM_SIGNATURE
        assert info.is_common

    def test_marker_wins_over_records(self, download_records):
        info = classify_file("SHASUMS256.txt", list(download_records.values()))
        assert info.is_common


# ════════════════════════════════════════════════════════════════════════
# Authoritative
# ════════════════════════════════════════════════════════════════════════


class TestAuthoritative:
    def test_binary_uses_record(self, download_records):
        records = list(download_records.values())
        info = classify_file("node-v22.15.0-linux-x64.tar.xz", records)
        assert info.kind is FileKind.BINARY
        assert info.resolution is Resolution.AUTHORITATIVE
        assert (info.os, info.arch, info.version) == ("linux", "x64", "22.15.0")
        assert info.size == 30023544
        assert info.record is download_records["linux"]
        assert not info.degraded

    def test_record_coordinates_override_filename_tokens(self, download_records):
        # filename says "win", the record says "windows"
        info = classify_file("node-v22.15.0-win-x64.zip", list(download_records.values()))
        assert info.os == "windows"
        assert info.platform == "windows-x64"

    @pytest.mark.parametrize("suffix,kind", [
        (".audit.json", FileKind.AUDIT),
        (".sig", FileKind.SIGNATURE),
        (".cert", FileKind.CERTIFICATE),
    ])
    def test_sidecar_shares_binary_coordinates(self, download_records, suffix, kind):
        info = classify_file("node-v22.15.0-win-x64.zip" + suffix, list(download_records.values()))
        assert info.kind is kind
        assert info.resolution is Resolution.AUTHORITATIVE
        assert (info.os, info.arch, info.version) == ("windows", "x64", "22.15.0")

    def test_matches_on_basename_only(self):
        record = DownloadRecord(os="linux", arch="arm64", version="1.0.0", path="/deep/dir/tool-v1.0.0.tgz")
        assert record.filename == "tool-v1.0.0.tgz"
        assert classify_file("tool-v1.0.0.tgz", [record]).resolution is Resolution.AUTHORITATIVE


# ════════════════════════════════════════════════════════════════════════
# Heuristic / unknown
# ════════════════════════════════════════════════════════════════════════


class TestHeuristic:
    def test_os_arch_version_from_tokens(self):
        info = classify_file("node-v20.10.0-darwin-arm64.tar.gz")
        assert info.kind is FileKind.BINARY
        assert info.resolution is Resolution.HEURISTIC
        assert (info.os, info.arch, info.version) == ("darwin", "arm64", "20.10.0")
        assert info.degraded

    def test_sidecar_kind_from_suffix(self):
        info = classify_file("node-v20.10.0-linux-x64.tar.xz.audit.json")
        assert info.kind is FileKind.AUDIT
        assert (info.os, info.arch) == ("linux", "x64")

    def test_missing_pieces_are_empty(self):
        info = classify_file("tool-linux")
        assert info.resolution is Resolution.HEURISTIC
        assert info.os == "linux"
        assert info.arch == ""
        assert info.version == ""

    def test_unknown_has_no_coordinates(self):
        info = classify_file("README.md")
        assert info.kind is FileKind.UNKNOWN
        assert info.resolution is Resolution.UNKNOWN
        assert (info.os, info.arch, info.version) == ("", "", "")
        assert info.degraded

    def test_to_dict(self):
        d = classify_file("node-v20.10.0-linux-x64.tar.xz").to_dict()
        assert d["kind"] == "binary"
        assert d["resolution"] == "heuristic"
        assert d["os"] == "linux"


class TestHelpers:
    def test_extract_version(self):
        assert extract_version_from_filename("node-v22.15.0-linux-x64.tar.xz") == "22.15.0"

    def test_extract_version_requires_more_than_v(self):
        assert extract_version_from_filename("tool-v-linux") == ""

    def test_kind_from_suffix(self):
        assert kind_from_suffix("a.tar.xz") is FileKind.BINARY
        assert kind_from_suffix("a.tar.xz.audit.json") is FileKind.AUDIT
        assert kind_from_suffix("a.tar.xz.sig") is FileKind.SIGNATURE
        assert kind_from_suffix("a.tar.xz.cert") is FileKind.CERTIFICATE
