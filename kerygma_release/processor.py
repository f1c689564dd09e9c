"""Local-filesystem distribution processor used by the CLI.

checksum: SHA-256 of every artifact, written to
          <output>/checksums/<distribution>.sha256
prepare:  every artifact file must exist
package:  copy artifacts into <output>/<distribution>/ (skipped on dry run)
"""

from __future__ import annotations

import hashlib
import os
import shutil
from pathlib import Path
from typing import Any

from kerygma_release.errors import DistributionError
from kerygma_release.model import Artifact, Distribution

CHUNK_SIZE = 1024 * 1024


def sha256_file(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


class LocalDistributionProcessor:
    def __init__(
        self,
        output_dir: Path,
        base_dir: Path | None = None,
        logger: Any = None,
        dry_run: bool = False,
    ) -> None:
        self._output_dir = output_dir
        self._base_dir = base_dir or Path.cwd()
        self._logger = logger
        self._dry_run = dry_run

    def _resolve(self, artifact: Artifact) -> Path:
        path = Path(artifact.path)
        return path if path.is_absolute() else self._base_dir / path

    def _existing(self, distribution: Distribution, artifact: Artifact) -> Path:
        path = self._resolve(artifact)
        if not path.is_file():
            raise DistributionError(distribution.name, f"artifact {path} does not exist")
        return path

    def checksum_distribution(self, distribution: Distribution) -> None:
        lines = []
        for artifact in distribution.artifacts:
            path = self._existing(distribution, artifact)
            checksum = sha256_file(path)
            if artifact.checksum and artifact.checksum.lower() != checksum:
                raise DistributionError(
                    distribution.name,
                    f"checksum mismatch for {artifact.file_name}: expected {artifact.checksum}, got {checksum}",
                )
            lines.append(f"{checksum}  {artifact.file_name}")

        target = self._output_dir / "checksums" / f"{distribution.name}.sha256"
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_suffix(".tmp")
        tmp.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")
        os.replace(str(tmp), str(target))

    def prepare_distribution(self, distribution: Distribution) -> None:
        if not distribution.artifacts:
            raise DistributionError(distribution.name, "no artifacts defined")
        for artifact in distribution.artifacts:
            self._existing(distribution, artifact)

    def package_distribution(self, distribution: Distribution) -> None:
        target = self._output_dir / distribution.name
        sources = [self._existing(distribution, a) for a in distribution.artifacts]
        if self._dry_run:
            if self._logger is not None:
                self._logger.info("[dryrun] would copy %d artifact(s) to %s", len(sources), target)
            return
        target.mkdir(parents=True, exist_ok=True)
        for source in sources:
            shutil.copy2(source, target / source.name)
