"""Tests for the release model and its property map."""

import dataclasses

import pytest

from kerygma_release.model import Artifact, Project, ReleaseService

from conftest import make_model


class TestProject:
    def test_snapshot_from_version(self):
        assert Project("app", "1.0.0-SNAPSHOT").is_snapshot is True
        assert Project("app", "1.0.0-snapshot").is_snapshot is True
        assert Project("app", "1.0.0").is_snapshot is False

    def test_explicit_snapshot_flag_wins(self):
        assert Project("app", "1.0.0", snapshot=True).is_snapshot is True
        assert Project("app", "1.0.0-SNAPSHOT", snapshot=False).is_snapshot is False

    def test_name_capitalized(self):
        assert Project("app", "1").name_capitalized == "App"
        assert Project("", "1").name_capitalized == ""


def test_artifact_file_name():
    assert Artifact("build/dist/app-1.0.zip").file_name == "app-1.0.zip"


def test_distribution_is_frozen():
    model = make_model()
    dist = model.distributions["app"]
    with pytest.raises(dataclasses.FrozenInstanceError):
        dist.artifacts = ()
    assert isinstance(dist.artifacts, tuple)


class TestReleaseService:
    def test_github_defaults(self):
        svc = ReleaseService(owner="acme", name="app")
        assert svc.resolved_host == "github.com"
        assert "releases/download/{{tagName}}/{{artifactFileName}}" in svc.download_url_template

    def test_gitlab_defaults(self):
        svc = ReleaseService(kind="gitlab", owner="acme", name="app")
        assert svc.resolved_host == "gitlab.com"
        assert "/-/releases/" in svc.release_notes_url_template

    def test_explicit_templates_win(self):
        svc = ReleaseService(download_url="https://cdn.test/{{artifactFileName}}")
        assert svc.download_url_template == "https://cdn.test/{{artifactFileName}}"


class TestProps:
    def test_project_keys(self):
        props = make_model().props()
        assert props["projectName"] == "app"
        assert props["projectNameCapitalized"] == "App"
        assert props["projectVersion"] == "1.2.0"
        assert props["project"]["version"] == "1.2.0"

    def test_release_keys(self):
        props = make_model().props()
        assert props["tagName"] == "v1.2.0"
        assert props["repoUrl"] == "https://github.com/acme/app"
        assert props["releaseNotesUrl"] == "https://github.com/acme/app/releases/tag/v1.2.0"
        assert props["release"]["tagName"] == "v1.2.0"

    def test_props_are_fresh_copies(self):
        model = make_model()
        first = model.props()
        first["artifactFileName"] = "x.zip"
        assert "artifactFileName" not in model.props()
