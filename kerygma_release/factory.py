"""Build the announce channels for a release from its config blocks.

Construction is two-phase: the config loader produces one value object
per configured channel, then each is validated (secrets resolved,
required values checked) before a channel object exists. Any invalid
block fails the whole build, so a misconfigured channel never reaches
the announce stage.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from kerygma_release import bluesky, discord, mastodon, sdkman, twitter
from kerygma_release.bluesky import BlueskyConfig
from kerygma_release.channel import Channel
from kerygma_release.discord import DiscordConfig
from kerygma_release.errors import ConfigurationError
from kerygma_release.http import Sender, send_json
from kerygma_release.mastodon import MastodonConfig
from kerygma_release.model import ReleaseContext
from kerygma_release.result import Err, Ok
from kerygma_release.sdkman import SdkmanConfig
from kerygma_release.twitter import TwitterConfig


@dataclass
class AnnounceConfig:
    """One optional block per channel; None means not configured."""
    sdkman: SdkmanConfig | None = None
    twitter: TwitterConfig | None = None
    discord: DiscordConfig | None = None
    mastodon: MastodonConfig | None = None
    bluesky: BlueskyConfig | None = None
    order: tuple[str, ...] = ()

    def configured(self) -> list[tuple[str, Any]]:
        """Present blocks in declaration order; names missing from order follow in CHANNEL_ORDER."""
        names = [name for name in self.order if name in CHANNEL_ORDER]
        names += [name for name in CHANNEL_ORDER if name not in names]
        return [
            (name, getattr(self, name))
            for name in names
            if getattr(self, name) is not None
        ]

    def as_dict(self) -> dict[str, Any]:
        return {name: cfg.as_dict() for name, cfg in self.configured()}


CHANNEL_ORDER = ("sdkman", "twitter", "discord", "mastodon", "bluesky")

_VALIDATORS: dict[str, Callable[..., Ok[Any] | Err[ConfigurationError]]] = {
    "sdkman": sdkman.validate,
    "twitter": twitter.validate,
    "discord": discord.validate,
    "mastodon": mastodon.validate,
    "bluesky": bluesky.validate,
}


def build_channels(context: ReleaseContext, send: Sender = send_json) -> list[Channel]:
    """Validate every configured block and return channels in configured order.

    Raises:
        ConfigurationError: If one or more enabled blocks are invalid.
    """
    announce = context.model.announce or AnnounceConfig()
    channels: list[Channel] = []
    problems: list[str] = []

    for name, cfg in announce.configured():
        result = _VALIDATORS[name](cfg, context, send)
        if isinstance(result, Ok):
            channels.append(result.value)
        else:
            problems.append(str(result.error))

    if problems:
        raise ConfigurationError("Announce configuration is invalid", problems)
    return channels
