"""SDKMAN! channel: publishes a candidate version through the vendor API.

Only zip archives of BINARY distributions are published. Each archive
is keyed by its SDKMAN! platform; if nothing qualifies the channel
warns and returns without calling the API.

A major release registers every platform, makes the version the
candidate's default and announces it. A minor release does the same
without changing the default.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from kerygma_release import env
from kerygma_release.channel import call_remote
from kerygma_release.errors import AnnounceError, ConfigurationError
from kerygma_release.http import Sender, send_json
from kerygma_release.model import DistributionType, ReleaseContext
from kerygma_release.platforms import SDKMAN_PLATFORMS
from kerygma_release.result import Err, Ok, Result
from kerygma_release.retry import RetryConfig
from kerygma_release.selector import extension_is, select_artifacts

NAME = "sdkman"
SDKMAN_CONSUMER_KEY = "SDKMAN_CONSUMER_KEY"
SDKMAN_CONSUMER_TOKEN = "SDKMAN_CONSUMER_TOKEN"
DEFAULT_API_HOST = "https://vendors.sdkman.io"

SUPPORTED_TYPES = frozenset({DistributionType.BINARY})


@dataclass
class SdkmanConfig:
    enabled: bool = False
    candidate: str = ""
    major: bool = True
    consumer_key: str = field(default="", repr=False)
    consumer_token: str = field(default="", repr=False)
    hashtag: str = ""
    api_host: str = DEFAULT_API_HOST

    @property
    def resolved_consumer_key(self) -> str:
        return env.resolve(SDKMAN_CONSUMER_KEY, self.consumer_key)

    @property
    def resolved_consumer_token(self) -> str:
        return env.resolve(SDKMAN_CONSUMER_TOKEN, self.consumer_token)

    def as_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "candidate": self.candidate,
            "major": self.major,
            "consumerKey": env.mask(self.resolved_consumer_key),
            "consumerToken": env.mask(self.resolved_consumer_token),
            "hashtag": self.hashtag,
            "apiHost": self.api_host,
        }


@dataclass(frozen=True)
class SdkmanRelease:
    """Everything the vendor API needs for one version."""
    candidate: str
    version: str
    platforms: dict[str, str]
    release_notes_url: str
    hashtag: str
    major: bool


class SdkmanChannel:
    name = NAME

    def __init__(
        self,
        context: ReleaseContext,
        config: SdkmanConfig,
        send: Sender = send_json,
        retry_config: RetryConfig | None = None,
    ) -> None:
        self._context = context
        self._config = config
        self._send = send
        self._retry = retry_config

    def is_enabled(self) -> bool:
        return self._config.enabled

    def is_snapshot_supported(self) -> bool:
        return False

    def collect_platforms(self) -> dict[str, str]:
        return select_artifacts(
            self._context, NAME, SUPPORTED_TYPES, extension_is(".zip"), SDKMAN_PLATFORMS.classify,
        )

    def plan(self, platforms: dict[str, str]) -> SdkmanRelease:
        model = self._context.model
        props = model.props()
        candidate = self._config.candidate.strip() or model.project.name
        return SdkmanRelease(
            candidate=candidate,
            version=model.project.version,
            platforms=platforms,
            release_notes_url=props["releaseNotesUrl"],
            hashtag=self._config.hashtag.strip() or candidate,
            major=self._config.major,
        )

    def _call(self, method: str, path: str, payload: dict[str, Any]) -> None:
        headers = {
            "Consumer-Key": self._config.resolved_consumer_key,
            "Consumer-Token": self._config.resolved_consumer_token,
        }
        url = f"{self._config.api_host.rstrip('/')}{path}"
        call_remote(self._context, NAME, self._send, url, payload, headers, method, retry_config=self._retry)

    def publish(self, release: SdkmanRelease) -> None:
        log = self._context.logger
        kind = "major" if release.major else "minor"
        log.info("Announcing %s release of '%s' candidate", kind, release.candidate)

        for platform, url in release.platforms.items():
            log.debug("Releasing %s %s for %s from %s", release.candidate, release.version, platform, url)
            self._call("POST", "/release", {
                "candidate": release.candidate,
                "version": release.version,
                "platform": platform,
                "url": url,
            })

        if release.major:
            self._call("PUT", "/default", {"candidate": release.candidate, "version": release.version})

        self._call("POST", "/announce/struct", {
            "candidate": release.candidate,
            "version": release.version,
            "hashtag": release.hashtag,
            "url": release.release_notes_url,
        })

    def execute(self) -> None:
        try:
            platforms = self.collect_platforms()
            if not platforms:
                self._context.logger.warning("No suitable artifacts were found. Skipping")
                return
            self.publish(self.plan(platforms))
        except Exception as exc:
            raise AnnounceError(NAME, exc) from exc


def validate(
    config: SdkmanConfig, context: ReleaseContext, send: Sender = send_json,
) -> Result[SdkmanChannel, ConfigurationError]:
    if config.enabled:
        problems = []
        if not config.resolved_consumer_key.strip():
            problems.append(f"sdkman.consumer_key must not be blank (or set {SDKMAN_CONSUMER_KEY})")
        if not config.resolved_consumer_token.strip():
            problems.append(f"sdkman.consumer_token must not be blank (or set {SDKMAN_CONSUMER_TOKEN})")
        if problems:
            return Err(ConfigurationError("Invalid sdkman configuration", problems))
    return Ok(SdkmanChannel(context, config, send))
