"""Twitter channel: posts the release status with OAuth 1.0a user credentials."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from kerygma_release import env
from kerygma_release.channel import call_remote, resolve_message
from kerygma_release.errors import AnnounceError, ConfigurationError
from kerygma_release.http import Sender, send_json
from kerygma_release.model import ReleaseContext
from kerygma_release.oauth import build_oauth1_header
from kerygma_release.result import Err, Ok, Result
from kerygma_release.retry import RetryConfig

NAME = "twitter"
TWEETS_URL = "https://api.twitter.com/2/tweets"
MAX_CHARS = 280

TWITTER_CONSUMER_KEY = "TWITTER_CONSUMER_KEY"
TWITTER_CONSUMER_SECRET = "TWITTER_CONSUMER_SECRET"
TWITTER_ACCESS_TOKEN = "TWITTER_ACCESS_TOKEN"
TWITTER_ACCESS_TOKEN_SECRET = "TWITTER_ACCESS_TOKEN_SECRET"

DEFAULT_STATUS = "\U0001F680 {{projectNameCapitalized}} {{projectVersion}} has been released! {{releaseNotesUrl}}"


@dataclass
class TwitterConfig:
    enabled: bool = False
    consumer_key: str = field(default="", repr=False)
    consumer_secret: str = field(default="", repr=False)
    access_token: str = field(default="", repr=False)
    access_token_secret: str = field(default="", repr=False)
    status: str = DEFAULT_STATUS

    @property
    def resolved_consumer_key(self) -> str:
        return env.resolve(TWITTER_CONSUMER_KEY, self.consumer_key)

    @property
    def resolved_consumer_secret(self) -> str:
        return env.resolve(TWITTER_CONSUMER_SECRET, self.consumer_secret)

    @property
    def resolved_access_token(self) -> str:
        return env.resolve(TWITTER_ACCESS_TOKEN, self.access_token)

    @property
    def resolved_access_token_secret(self) -> str:
        return env.resolve(TWITTER_ACCESS_TOKEN_SECRET, self.access_token_secret)

    def as_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "consumerKey": env.mask(self.resolved_consumer_key),
            "consumerSecret": env.mask(self.resolved_consumer_secret),
            "accessToken": env.mask(self.resolved_access_token),
            "accessTokenSecret": env.mask(self.resolved_access_token_secret),
            "status": self.status,
        }


class TwitterChannel:
    name = NAME

    def __init__(
        self,
        context: ReleaseContext,
        config: TwitterConfig,
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

    def _post(self, status: str) -> dict[str, Any]:
        cfg = self._config
        # signed per attempt so a retry gets a fresh nonce
        auth = build_oauth1_header(
            "POST", TWEETS_URL,
            cfg.resolved_consumer_key, cfg.resolved_consumer_secret,
            cfg.resolved_access_token, cfg.resolved_access_token_secret,
        )
        return self._send(TWEETS_URL, {"text": status}, {"Authorization": auth})

    def execute(self) -> None:
        try:
            status = resolve_message(self._context, self._config.status, "twitter.status")
            if len(status) > MAX_CHARS:
                raise ValueError(f"Status is {len(status)} characters, over the limit of {MAX_CHARS}")
            self._context.logger.info("Tweeting: %s", status)
            call_remote(self._context, NAME, self._post, status, retry_config=self._retry)
        except Exception as exc:
            raise AnnounceError(NAME, exc) from exc


def validate(
    config: TwitterConfig, context: ReleaseContext, send: Sender = send_json,
) -> Result[TwitterChannel, ConfigurationError]:
    if config.enabled:
        required = {
            "consumer_key": (config.resolved_consumer_key, TWITTER_CONSUMER_KEY),
            "consumer_secret": (config.resolved_consumer_secret, TWITTER_CONSUMER_SECRET),
            "access_token": (config.resolved_access_token, TWITTER_ACCESS_TOKEN),
            "access_token_secret": (config.resolved_access_token_secret, TWITTER_ACCESS_TOKEN_SECRET),
        }
        problems = [
            f"twitter.{key} must not be blank (or set {env_var})"
            for key, (value, env_var) in required.items()
            if not value.strip()
        ]
        if not config.status.strip():
            problems.append("twitter.status must not be blank")
        if problems:
            return Err(ConfigurationError("Invalid twitter configuration", problems))
    return Ok(TwitterChannel(context, config, send))
