"""Collect a release's artifacts for one channel, keyed by platform."""

from __future__ import annotations

from typing import Callable, Collection

from kerygma_release.model import Artifact, DistributionType, ReleaseContext
from kerygma_release.templates import render


def extension_is(*suffixes: str) -> Callable[[Artifact], bool]:
    return lambda artifact: artifact.path.endswith(suffixes)


def artifact_url(context: ReleaseContext, artifact: Artifact) -> str:
    props = context.model.props()
    props["artifactFileName"] = artifact.file_name
    props["artifactPlatform"] = artifact.platform
    return render(context.model.release.download_url_template, props, "downloadUrl")


def select_artifacts(
    context: ReleaseContext,
    channel: str,
    supported_types: Collection[DistributionType],
    eligible: Callable[[Artifact], bool],
    classify: Callable[[str | None], str | None],
) -> dict[str, str]:
    """Map canonical platform key to download URL.

    Later artifacts replace earlier ones on the same key, with a warning.
    An empty result means there is nothing to announce.
    """
    log = context.logger
    platforms: dict[str, str] = {}

    for distribution in context.model.distributions.values():
        if distribution.type not in supported_types:
            continue
        for artifact in distribution.artifacts:
            if not eligible(artifact):
                log.debug(
                    "Artifact %s is not suitable for %s publication. Skipping",
                    artifact.file_name, channel,
                )
                continue

            platform = classify(artifact.platform)
            if platform is None:
                log.warning(
                    "Artifact %s has unsupported platform %r for %s. Skipping",
                    artifact.file_name, artifact.platform, channel,
                )
                continue

            url = artifact_url(context, artifact)
            if platform in platforms:
                log.warning("Platform %s: %s will replace %s", platform, url, platforms[platform])
            platforms[platform] = url

    return platforms
