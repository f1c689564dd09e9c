"""Release model: project, distributions, artifacts and the source host.

The model is built once from the release file and is read-only for the
whole pipeline run. Distributions keep their artifacts in a tuple so no
stage can append to or reorder them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from kerygma_release.factory import AnnounceConfig


class DistributionType(Enum):
    BINARY = "BINARY"
    JAVA_BINARY = "JAVA_BINARY"
    JLINK = "JLINK"
    NATIVE_IMAGE = "NATIVE_IMAGE"
    NATIVE_PACKAGE = "NATIVE_PACKAGE"
    SINGLE_JAR = "SINGLE_JAR"


@dataclass(frozen=True)
class Project:
    name: str
    version: str
    description: str = ""
    website: str = ""
    authors: tuple[str, ...] = ()
    snapshot: bool | None = None

    @property
    def is_snapshot(self) -> bool:
        if self.snapshot is not None:
            return self.snapshot
        return self.version.upper().endswith("-SNAPSHOT")

    @property
    def name_capitalized(self) -> str:
        return self.name[:1].upper() + self.name[1:]


@dataclass(frozen=True)
class Artifact:
    path: str
    platform: str = ""
    checksum: str | None = None

    @property
    def file_name(self) -> str:
        return PurePath(self.path).name


@dataclass(frozen=True)
class Distribution:
    name: str
    type: DistributionType
    artifacts: tuple[Artifact, ...] = ()


# Default URL templates per source host kind.
_SERVICE_DEFAULTS: dict[str, dict[str, str]] = {
    "github": {
        "host": "github.com",
        "release_notes_url": "https://{{repoHost}}/{{repoOwner}}/{{repoName}}/releases/tag/{{tagName}}",
        "download_url": "https://{{repoHost}}/{{repoOwner}}/{{repoName}}/releases/download/{{tagName}}/{{artifactFileName}}",
    },
    "gitlab": {
        "host": "gitlab.com",
        "release_notes_url": "https://{{repoHost}}/{{repoOwner}}/{{repoName}}/-/releases/{{tagName}}",
        "download_url": "https://{{repoHost}}/{{repoOwner}}/{{repoName}}/-/releases/{{tagName}}/downloads/{{artifactFileName}}",
    },
    "gitea": {
        "host": "gitea.com",
        "release_notes_url": "https://{{repoHost}}/{{repoOwner}}/{{repoName}}/releases/tag/{{tagName}}",
        "download_url": "https://{{repoHost}}/{{repoOwner}}/{{repoName}}/releases/download/{{tagName}}/{{artifactFileName}}",
    },
}

SERVICE_KINDS = tuple(_SERVICE_DEFAULTS)


@dataclass(frozen=True)
class ReleaseService:
    """Where the release lives: host, repository and URL templates."""
    kind: str = "github"
    owner: str = ""
    name: str = ""
    host: str = ""
    tag_name: str = "v{{projectVersion}}"
    release_notes_url: str = ""
    download_url: str = ""

    def _default(self, key: str) -> str:
        return _SERVICE_DEFAULTS.get(self.kind, _SERVICE_DEFAULTS["github"])[key]

    @property
    def resolved_host(self) -> str:
        return self.host or self._default("host")

    @property
    def release_notes_url_template(self) -> str:
        return self.release_notes_url or self._default("release_notes_url")

    @property
    def download_url_template(self) -> str:
        return self.download_url or self._default("download_url")

    def fill_props(self, props: dict[str, Any]) -> None:
        """Add repository, tag and release-notes keys to a project property map."""
        from kerygma_release.templates import render

        host = self.resolved_host
        props["repoHost"] = host
        props["repoOwner"] = self.owner
        props["repoName"] = self.name
        props["repoUrl"] = f"https://{host}/{self.owner}/{self.name}"
        props["tagName"] = render(self.tag_name, props, "tagName")
        props["releaseNotesUrl"] = render(self.release_notes_url_template, props, "releaseNotesUrl")
        props["release"] = {
            "host": host,
            "owner": self.owner,
            "name": self.name,
            "url": props["repoUrl"],
            "tagName": props["tagName"],
            "notesUrl": props["releaseNotesUrl"],
        }


@dataclass(frozen=True)
class Model:
    project: Project
    release: ReleaseService = field(default_factory=ReleaseService)
    distributions: Mapping[str, Distribution] = field(default_factory=dict)
    announce: AnnounceConfig | None = None

    def props(self) -> dict[str, Any]:
        """A fresh property map; callers may add keys to their copy."""
        from kerygma_release.properties import model_props
        return model_props(self)


@dataclass(frozen=True)
class ReleaseContext:
    """Everything a stage or channel may read during one invocation."""
    model: Model
    logger: Any
    dry_run: bool = False
