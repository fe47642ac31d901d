"""
Tests for layered configuration.

Precedence: defaults < YAML < .env < environment < overrides.
"""

from __future__ import annotations

import pytest

from runtimedist.config import ConfigLoader, PublishConfig, SiteGenConfig, parse_bool
from runtimedist.faults import ConfigInvalidFault, ConfigMissingFault
from runtimedist.releases import ReleasePublisher

from conftest import NOW, FakeHostingClient


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Keep a stray runtimedist.yaml or .env in the repo out of these tests."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def load(**kwargs):
    kwargs.setdefault("environ", {})
    return ConfigLoader.load(**kwargs)


# ════════════════════════════════════════════════════════════════════════
# Sources and precedence
# ════════════════════════════════════════════════════════════════════════


class TestSources:
    def test_defaults(self):
        config = load().sitegen()
        assert config == SiteGenConfig(store_dir="releases", output_dir="site", dry_run=False, log_level="INFO")

    def test_default_yaml_file_picked_up(self, isolated_cwd):
        (isolated_cwd / "runtimedist.yaml").write_text("sitegen:\n  output_dir: public\n")
        assert load().sitegen().output_dir == "public"

    def test_explicit_yaml_file(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("sitegen:\n  store_dir: /srv/releases\n  dry_run: true\n")
        config = load(path=str(path)).sitegen()
        assert config.store_dir == "/srv/releases"
        assert config.dry_run is True
        assert config.output_dir == "site"

    def test_env_file(self, isolated_cwd):
        (isolated_cwd / ".env").write_text("RTD_SITEGEN__STORE_DIR=from-dotenv\nOTHER=ignored\n")
        assert load().sitegen().store_dir == "from-dotenv"

    def test_environment(self):
        config = load(environ={
            "RTD_SITEGEN__OUTPUT_DIR": "public",
            "RTD_SITEGEN__DRY_RUN": "yes",
            "HOME": "/root",
        }).sitegen()
        assert config.output_dir == "public"
        assert config.dry_run is True

    def test_custom_prefix(self):
        loader = load(env_prefix="SITE_", environ={"SITE_SITEGEN__OUTPUT_DIR": "x", "RTD_SITEGEN__OUTPUT_DIR": "y"})
        assert loader.sitegen().output_dir == "x"


class TestPrecedence:
    def test_env_beats_yaml(self, isolated_cwd):
        (isolated_cwd / "runtimedist.yaml").write_text("sitegen:\n  output_dir: from-yaml\n")
        config = load(environ={"RTD_SITEGEN__OUTPUT_DIR": "from-env"}).sitegen()
        assert config.output_dir == "from-env"

    def test_env_beats_dotenv(self, isolated_cwd):
        (isolated_cwd / ".env").write_text("RTD_SITEGEN__OUTPUT_DIR=from-dotenv\n")
        config = load(environ={"RTD_SITEGEN__OUTPUT_DIR": "from-env"}).sitegen()
        assert config.output_dir == "from-env"

    def test_overrides_win(self, isolated_cwd):
        (isolated_cwd / "runtimedist.yaml").write_text("sitegen:\n  output_dir: from-yaml\n  store_dir: kept\n")
        config = load(
            environ={"RTD_SITEGEN__OUTPUT_DIR": "from-env"},
            overrides={"sitegen": {"output_dir": "from-flag"}},
        ).sitegen()
        assert config.output_dir == "from-flag"
        assert config.store_dir == "kept"

    def test_get_and_to_dict(self):
        loader = load(overrides={"publish": {"repository": "acme/runtimes"}})
        assert loader.get("publish.repository") == "acme/runtimes"
        assert loader.get("publish.missing", "fallback") == "fallback"
        snapshot = loader.to_dict()
        snapshot["publish"]["repository"] = "changed"
        assert loader.get("publish.repository") == "acme/runtimes"


# ════════════════════════════════════════════════════════════════════════
# Validation
# ════════════════════════════════════════════════════════════════════════


class TestValidation:
    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigMissingFault):
            load(path=str(tmp_path / "nope.yaml"))

    @pytest.mark.parametrize("content", ["sitegen: [unclosed", "- just\n- a list\n"])
    def test_malformed_yaml(self, tmp_path, content):
        path = tmp_path / "bad.yaml"
        path.write_text(content)
        with pytest.raises(ConfigInvalidFault):
            load(path=str(path))

    def test_empty_yaml_is_fine(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load(path=str(path)).sitegen().output_dir == "site"

    def test_empty_output_dir(self):
        with pytest.raises(ConfigMissingFault) as exc_info:
            load(environ={"RTD_SITEGEN__OUTPUT_DIR": ""}).sitegen()
        assert exc_info.value.metadata["key"] == "sitegen.output_dir"

    def test_log_level_normalised(self):
        assert load(environ={"RTD_SITEGEN__LOG_LEVEL": "debug"}).sitegen().log_level == "DEBUG"

    def test_bad_log_level(self):
        with pytest.raises(ConfigInvalidFault):
            load(environ={"RTD_SITEGEN__LOG_LEVEL": "LOUD"}).sitegen()

    def test_bad_boolean(self):
        with pytest.raises(ConfigInvalidFault) as exc_info:
            load(environ={"RTD_SITEGEN__DRY_RUN": "maybe"}).sitegen()
        assert exc_info.value.metadata["key"] == "sitegen.dry_run"

    def test_non_scalar_value(self):
        with pytest.raises(ConfigInvalidFault):
            load(overrides={"sitegen": {"output_dir": ["a", "b"]}}).sitegen()

    def test_section_must_be_mapping(self):
        with pytest.raises(ConfigInvalidFault):
            load(overrides={"sitegen": "site"}).sitegen()

    @pytest.mark.parametrize("value,expected", [
        (True, True), ("1", True), ("On", True), ("false", False), ("0", False), (" no ", False),
    ])
    def test_parse_bool(self, value, expected):
        assert parse_bool("k", value) is expected


class TestPublishConfig:
    def test_defaults(self):
        assert load().publish() == PublishConfig()

    def test_from_environment(self):
        config = load(environ={
            "RTD_PUBLISH__REPOSITORY": "acme/runtimes",
            "RTD_PUBLISH__DRAFT": "true",
            "RTD_PUBLISH__NAME_TEMPLATE": "{runtime} v{version}",
        }).publish()
        assert config.repository == "acme/runtimes"
        assert config.draft is True

    def test_bad_repository(self):
        with pytest.raises(ConfigInvalidFault):
            load(environ={"RTD_PUBLISH__REPOSITORY": "no-owner"}).publish()

    def test_template_needs_version(self):
        with pytest.raises(ConfigInvalidFault):
            load(environ={"RTD_PUBLISH__NAME_TEMPLATE": "{runtime}"}).publish()

    def test_publisher_from_config(self, memory_store):
        client = FakeHostingClient()
        config = load(environ={"RTD_PUBLISH__DRAFT": "1", "RTD_PUBLISH__NAME_TEMPLATE": "{runtime}@{version}"}).publish()
        ReleasePublisher.from_config(client, memory_store, config, clock=lambda: NOW).publish("nodejs", ["22.15.0"], [], [])
        _, name, _, draft = client.created[0]
        assert name == "nodejs@22.15.0"
        assert draft is True
