"""Mastodon channel: publishes the release status on a Fediverse instance."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from kerygma_release import env
from kerygma_release.channel import call_remote, resolve_message
from kerygma_release.errors import AnnounceError, ConfigurationError
from kerygma_release.http import Sender, send_json
from kerygma_release.model import ReleaseContext
from kerygma_release.result import Err, Ok, Result
from kerygma_release.retry import RetryConfig

NAME = "mastodon"
MASTODON_ACCESS_TOKEN = "MASTODON_ACCESS_TOKEN"
DEFAULT_STATUS = "\U0001F680 {{projectNameCapitalized}} {{projectVersion}} has been released! {{releaseNotesUrl}}"
VISIBILITIES = ("public", "unlisted", "private", "direct")


@dataclass
class MastodonConfig:
    enabled: bool = False
    host: str = ""
    access_token: str = field(default="", repr=False)
    status: str = DEFAULT_STATUS
    visibility: str = "public"
    max_chars: int = 500

    @property
    def resolved_access_token(self) -> str:
        return env.resolve(MASTODON_ACCESS_TOKEN, self.access_token)

    def as_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "host": self.host,
            "accessToken": env.mask(self.resolved_access_token),
            "status": self.status,
            "visibility": self.visibility,
        }


class MastodonChannel:
    name = NAME

    def __init__(
        self,
        context: ReleaseContext,
        config: MastodonConfig,
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
        return True

    def build_status(self) -> str:
        status = resolve_message(self._context, self._config.status, "mastodon.status")
        if len(status) > self._config.max_chars:
            raise ValueError(
                f"Status is {len(status)} characters, over the instance limit of {self._config.max_chars}"
            )
        return status

    def execute(self) -> None:
        try:
            status = self.build_status()
            url = f"{self._config.host.rstrip('/')}/api/v1/statuses"
            self._context.logger.info("Posting status to %s", self._config.host)
            call_remote(
                self._context, NAME, self._send,
                url, {"status": status, "visibility": self._config.visibility},
                {"Authorization": f"Bearer {self._config.resolved_access_token}"},
                retry_config=self._retry,
            )
        except Exception as exc:
            raise AnnounceError(NAME, exc) from exc


def validate(
    config: MastodonConfig, context: ReleaseContext, send: Sender = send_json,
) -> Result[MastodonChannel, ConfigurationError]:
    if config.enabled:
        problems = []
        if not config.host.strip():
            problems.append("mastodon.host must not be blank")
        if not config.resolved_access_token.strip():
            problems.append(f"mastodon.access_token must not be blank (or set {MASTODON_ACCESS_TOKEN})")
        if config.visibility not in VISIBILITIES:
            problems.append(f"mastodon.visibility must be one of {', '.join(VISIBILITIES)}")
        if problems:
            return Err(ConfigurationError("Invalid mastodon configuration", problems))
    return Ok(MastodonChannel(context, config, send))
