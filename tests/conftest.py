"""Shared fixtures: a recording logger, a fake HTTP sender and a sample model."""

from __future__ import annotations

import pytest

from kerygma_release.factory import AnnounceConfig
from kerygma_release.model import (
    Artifact,
    Distribution,
    DistributionType,
    Model,
    Project,
    ReleaseContext,
    ReleaseService,
)


class RecordingLogger:
    def __init__(self):
        self.records = []

    def _log(self, level, msg, *args):
        self.records.append((level, msg % args if args else msg))

    def debug(self, msg, *args):
        self._log("debug", msg, *args)

    def info(self, msg, *args):
        self._log("info", msg, *args)

    def warning(self, msg, *args):
        self._log("warning", msg, *args)

    def error(self, msg, *args):
        self._log("error", msg, *args)

    def messages(self, level):
        return [m for lvl, m in self.records if lvl == level]


class FakeSender:
    """Stands in for http.send_json and records every call."""

    def __init__(self, responses=None, fail_with=None):
        self.calls = []
        self._responses = list(responses or [])
        self._fail_with = fail_with

    def __call__(self, url, payload, headers=None, method="POST", timeout=30.0):
        self.calls.append({"url": url, "payload": payload, "headers": headers or {}, "method": method})
        if self._fail_with is not None:
            raise self._fail_with
        if self._responses:
            return self._responses.pop(0)
        return {"ok": True}


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def sender():
    return FakeSender()


def make_model(distributions=None, announce=None, version="1.2.0", snapshot=None):
    if distributions is None:
        distributions = {
            "app": Distribution(
                name="app",
                type=DistributionType.BINARY,
                artifacts=(
                    Artifact("build/app-1.2.0-linux-x86_64.zip", "linux-x86_64"),
                    Artifact("build/app-1.2.0-osx-arm64.zip", "osx-arm64"),
                    Artifact("build/app-1.2.0-windows-x86_64.zip", "windows-x86_64"),
                    Artifact("build/app-1.2.0.tar.gz", ""),
                ),
            ),
        }
    return Model(
        project=Project(name="app", version=version, description="A sample app", snapshot=snapshot),
        release=ReleaseService(kind="github", owner="acme", name="app"),
        distributions=distributions,
        announce=announce or AnnounceConfig(),
    )


def make_context(model=None, logger=None, dry_run=False):
    return ReleaseContext(model=model or make_model(), logger=logger or RecordingLogger(), dry_run=dry_run)
