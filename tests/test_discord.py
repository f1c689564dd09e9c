"""Tests for the Discord channel."""

import pytest

from kerygma_release import discord
from kerygma_release.discord import DiscordChannel, DiscordConfig, DiscordEmbed
from kerygma_release.errors import AnnounceError
from kerygma_release.http import HttpError
from kerygma_release.result import Err, Ok
from kerygma_release.retry import NO_RETRY

from conftest import FakeSender, make_context

WEBHOOK = "https://discord.com/api/webhooks/test"


def test_posts_message_to_webhook():
    send = FakeSender()
    DiscordChannel(make_context(), DiscordConfig(enabled=True, webhook=WEBHOOK), send).execute()
    assert send.calls[0]["url"] == WEBHOOK
    assert send.calls[0]["payload"]["content"].startswith("\U0001F680 App 1.2.0")


def test_embed_payload():
    send = FakeSender()
    cfg = DiscordConfig(enabled=True, webhook=WEBHOOK, embed=True, message="{{projectDescription}}")
    DiscordChannel(make_context(), cfg, send).execute()
    embed = send.calls[0]["payload"]["embeds"][0]
    assert embed["title"] == "App 1.2.0"
    assert embed["description"] == "A sample app"
    assert embed["url"] == "https://github.com/acme/app/releases/tag/v1.2.0"
    assert embed["fields"] == [{"name": "Tag", "value": "v1.2.0", "inline": True}]


def test_long_message_truncated():
    channel = DiscordChannel(make_context(), DiscordConfig(enabled=True, webhook=WEBHOOK, message="y" * 2500))
    assert len(channel.build_payload()["content"]) == 2000


def test_dry_run_makes_no_calls():
    send = FakeSender()
    DiscordChannel(make_context(dry_run=True), DiscordConfig(enabled=True, webhook=WEBHOOK), send).execute()
    assert send.calls == []


def test_server_error_wrapped():
    send = FakeSender(fail_with=HttpError(WEBHOOK, "HTTP 500", 500))
    channel = DiscordChannel(make_context(), DiscordConfig(enabled=True, webhook=WEBHOOK), send, NO_RETRY)
    with pytest.raises(AnnounceError) as exc_info:
        channel.execute()
    assert exc_info.value.channel == "discord"


def test_embed_field_inline_is_bool():
    embed = DiscordEmbed(title="T", description="D")
    embed.add_field("key", "value", inline=True)
    embed.add_field("key2", "value2")
    assert embed.fields[0]["inline"] is True
    assert embed.fields[1]["inline"] is False


class TestValidate:
    def test_webhook_required(self, monkeypatch):
        monkeypatch.delenv("DISCORD_WEBHOOK", raising=False)
        result = discord.validate(DiscordConfig(enabled=True), make_context())
        assert isinstance(result, Err)
        assert "DISCORD_WEBHOOK" in str(result.error)

    def test_webhook_from_env(self, monkeypatch):
        monkeypatch.setenv("DISCORD_WEBHOOK", WEBHOOK)
        result = discord.validate(DiscordConfig(enabled=True), make_context())
        assert isinstance(result, Ok)

    def test_webhook_masked(self):
        assert DiscordConfig(webhook=WEBHOOK).as_dict()["webhook"] == "************"
