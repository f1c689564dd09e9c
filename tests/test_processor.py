"""Tests for the local distribution processor."""

import hashlib

import pytest

from kerygma_release.errors import DistributionError
from kerygma_release.model import Artifact, Distribution, DistributionType
from kerygma_release.processor import LocalDistributionProcessor, sha256_file

from conftest import RecordingLogger


@pytest.fixture
def workspace(tmp_path):
    build = tmp_path / "build"
    build.mkdir()
    (build / "app.zip").write_bytes(b"zip-bytes")
    (build / "app.tar.gz").write_bytes(b"tar-bytes")
    return tmp_path


def _dist(*paths, checksum=None):
    artifacts = tuple(Artifact(p, checksum=checksum) for p in paths)
    return Distribution("app", DistributionType.BINARY, artifacts)


def _processor(root, **kwargs):
    return LocalDistributionProcessor(root / "out", base_dir=root, **kwargs)


class TestChecksum:
    def test_writes_checksum_file(self, workspace):
        _processor(workspace).checksum_distribution(_dist("build/app.zip", "build/app.tar.gz"))
        lines = (workspace / "out" / "checksums" / "app.sha256").read_text().splitlines()
        expected = hashlib.sha256(b"zip-bytes").hexdigest()
        assert lines[0] == f"{expected}  app.zip"
        assert lines[1].endswith("  app.tar.gz")

    def test_matching_declared_checksum(self, workspace):
        digest = hashlib.sha256(b"zip-bytes").hexdigest().upper()
        _processor(workspace).checksum_distribution(_dist("build/app.zip", checksum=digest))

    def test_mismatched_declared_checksum(self, workspace):
        with pytest.raises(DistributionError, match="checksum mismatch"):
            _processor(workspace).checksum_distribution(_dist("build/app.zip", checksum="00"))

    def test_sha256_file(self, workspace):
        assert sha256_file(workspace / "build" / "app.zip") == hashlib.sha256(b"zip-bytes").hexdigest()


class TestPrepare:
    def test_existing_artifacts_pass(self, workspace):
        _processor(workspace).prepare_distribution(_dist("build/app.zip"))

    def test_missing_artifact(self, workspace):
        with pytest.raises(DistributionError) as exc_info:
            _processor(workspace).prepare_distribution(_dist("build/missing.zip"))
        assert exc_info.value.distribution == "app"

    def test_no_artifacts(self, workspace):
        with pytest.raises(DistributionError, match="no artifacts"):
            _processor(workspace).prepare_distribution(_dist())


class TestPackage:
    def test_copies_artifacts(self, workspace):
        _processor(workspace).package_distribution(_dist("build/app.zip"))
        assert (workspace / "out" / "app" / "app.zip").read_bytes() == b"zip-bytes"

    def test_dry_run_copies_nothing(self, workspace):
        logger = RecordingLogger()
        _processor(workspace, logger=logger, dry_run=True).package_distribution(_dist("build/app.zip"))
        assert not (workspace / "out" / "app").exists()
        assert any("[dryrun]" in m for m in logger.messages("info"))
