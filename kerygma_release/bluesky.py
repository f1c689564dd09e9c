"""Bluesky (AT Protocol) channel.

Posting needs two calls: createSession with the handle and app
password, then createRecord with the session's access JWT. On dry run
neither call is made.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from kerygma_release import env
from kerygma_release.channel import call_remote, resolve_message
from kerygma_release.errors import AnnounceError, ConfigurationError
from kerygma_release.http import Sender, send_json
from kerygma_release.model import ReleaseContext
from kerygma_release.result import Err, Ok, Result
from kerygma_release.retry import RetryConfig

NAME = "bluesky"
BLUESKY_APP_PASSWORD = "BLUESKY_APP_PASSWORD"
DEFAULT_STATUS = "\U0001F680 {{projectNameCapitalized}} {{projectVersion}} has been released! {{releaseNotesUrl}}"
MAX_CHARS = 300


@dataclass
class BlueskyConfig:
    enabled: bool = False
    handle: str = ""
    app_password: str = field(default="", repr=False)
    service_url: str = "https://bsky.social"
    status: str = DEFAULT_STATUS

    @property
    def resolved_app_password(self) -> str:
        return env.resolve(BLUESKY_APP_PASSWORD, self.app_password)

    def as_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "handle": self.handle,
            "appPassword": env.mask(self.resolved_app_password),
            "serviceUrl": self.service_url,
            "status": self.status,
        }


def truncate(text: str, limit: int = MAX_CHARS) -> str:
    """Cut at a word boundary, leaving room for an ellipsis."""
    if len(text) <= limit:
        return text
    trunc_at = text.rfind(" ", 0, limit - 3)
    if trunc_at <= 0:
        trunc_at = limit - 3
    return text[:trunc_at].rstrip() + "..."


class BlueskyChannel:
    name = NAME

    def __init__(
        self,
        context: ReleaseContext,
        config: BlueskyConfig,
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

    def build_record(self) -> dict[str, Any]:
        text = resolve_message(self._context, self._config.status, "bluesky.status")
        return {
            "$type": "app.bsky.feed.post",
            "text": truncate(text),
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }

    def execute(self) -> None:
        base = self._config.service_url.rstrip("/")
        try:
            record = self.build_record()
            self._context.logger.info("Posting to Bluesky as %s", self._config.handle)
            session = call_remote(
                self._context, NAME, self._send,
                f"{base}/xrpc/com.atproto.server.createSession",
                {"identifier": self._config.handle, "password": self._config.resolved_app_password},
                retry_config=self._retry,
            )
            if session is None:
                return
            call_remote(
                self._context, NAME, self._send,
                f"{base}/xrpc/com.atproto.repo.createRecord",
                {"repo": session["did"], "collection": "app.bsky.feed.post", "record": record},
                {"Authorization": f"Bearer {session['accessJwt']}"},
                retry_config=self._retry,
            )
        except Exception as exc:
            raise AnnounceError(NAME, exc) from exc


def validate(
    config: BlueskyConfig, context: ReleaseContext, send: Sender = send_json,
) -> Result[BlueskyChannel, ConfigurationError]:
    if config.enabled:
        problems = []
        if not config.handle.strip():
            problems.append("bluesky.handle must not be blank")
        if not config.resolved_app_password.strip():
            problems.append(f"bluesky.app_password must not be blank (or set {BLUESKY_APP_PASSWORD})")
        if problems:
            return Err(ConfigurationError("Invalid bluesky configuration", problems))
    return Ok(BlueskyChannel(context, config, send))
