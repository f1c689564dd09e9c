"""Discord channel: posts the release message to a channel webhook."""

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

NAME = "discord"
DISCORD_WEBHOOK = "DISCORD_WEBHOOK"
DEFAULT_MESSAGE = "\U0001F680 {{projectNameCapitalized}} {{projectVersion}} has been released! {{releaseNotesUrl}}"
RELEASE_COLOR = 0x3498DB
MAX_CONTENT = 2000


@dataclass
class DiscordEmbed:
    title: str
    description: str
    url: str = ""
    color: int = RELEASE_COLOR
    fields: list[dict[str, Any]] = field(default_factory=list)

    def add_field(self, name: str, value: str, inline: bool = False) -> None:
        self.fields.append({"name": name, "value": value, "inline": inline})

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "color": self.color,
        }
        if self.url:
            payload["url"] = self.url
        if self.fields:
            payload["fields"] = self.fields
        return payload


@dataclass
class DiscordConfig:
    enabled: bool = False
    webhook: str = field(default="", repr=False)
    message: str = DEFAULT_MESSAGE
    embed: bool = False

    @property
    def resolved_webhook(self) -> str:
        return env.resolve(DISCORD_WEBHOOK, self.webhook)

    def as_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "webhook": env.mask(self.resolved_webhook),
            "message": self.message,
            "embed": self.embed,
        }


class DiscordChannel:
    name = NAME

    def __init__(
        self,
        context: ReleaseContext,
        config: DiscordConfig,
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

    def build_payload(self) -> dict[str, Any]:
        message = resolve_message(self._context, self._config.message, "discord.message")
        if len(message) > MAX_CONTENT:
            message = message[:MAX_CONTENT - 3] + "..."
        if not self._config.embed:
            return {"content": message}

        props = self._context.model.props()
        embed = DiscordEmbed(
            title=f"{props['projectNameCapitalized']} {props['projectVersion']}",
            description=message,
            url=props["releaseNotesUrl"],
        )
        embed.add_field("Tag", props["tagName"], inline=True)
        return {"embeds": [embed.to_payload()]}

    def execute(self) -> None:
        try:
            payload = self.build_payload()
            self._context.logger.info("Posting release message to Discord")
            call_remote(
                self._context, NAME, self._send,
                self._config.resolved_webhook, payload,
                retry_config=self._retry,
            )
        except Exception as exc:
            raise AnnounceError(NAME, exc) from exc


def validate(
    config: DiscordConfig, context: ReleaseContext, send: Sender = send_json,
) -> Result[DiscordChannel, ConfigurationError]:
    if config.enabled:
        if not config.resolved_webhook.strip():
            return Err(ConfigurationError(f"discord.webhook must not be blank (or set {DISCORD_WEBHOOK})"))
        if not config.message.strip():
            return Err(ConfigurationError("discord.message must not be blank"))
    return Ok(DiscordChannel(context, config, send))
