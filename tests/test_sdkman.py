"""Tests for the SDKMAN! channel."""

import pytest

from kerygma_release import sdkman
from kerygma_release.errors import AnnounceError, ConfigurationError
from kerygma_release.http import HttpError
from kerygma_release.model import Artifact, Distribution, DistributionType
from kerygma_release.result import Err, Ok
from kerygma_release.sdkman import SdkmanChannel, SdkmanConfig

from conftest import FakeSender, RecordingLogger, make_context, make_model


def _config(**overrides):
    values = dict(enabled=True, consumer_key="key", consumer_token="token")
    values.update(overrides)
    return SdkmanConfig(**values)


class TestExecute:
    def test_major_release(self):
        send = FakeSender()
        SdkmanChannel(make_context(), _config(), send).execute()

        paths = [(c["method"], c["url"].rsplit("sdkman.io", 1)[1]) for c in send.calls]
        assert paths == [
            ("POST", "/release"), ("POST", "/release"), ("POST", "/release"),
            ("PUT", "/default"),
            ("POST", "/announce/struct"),
        ]
        platforms = [c["payload"]["platform"] for c in send.calls[:3]]
        assert platforms == ["LINUX_64", "MAC_ARM64", "WINDOWS_64"]
        assert send.calls[0]["headers"] == {"Consumer-Key": "key", "Consumer-Token": "token"}

    def test_minor_release_does_not_set_default(self):
        send = FakeSender()
        SdkmanChannel(make_context(), _config(major=False), send).execute()
        assert [c["url"].endswith("/default") for c in send.calls].count(True) == 0
        assert send.calls[-1]["url"].endswith("/announce/struct")

    def test_candidate_defaults_to_project_name(self):
        send = FakeSender()
        SdkmanChannel(make_context(), _config(), send).execute()
        announce = send.calls[-1]["payload"]
        assert announce["candidate"] == "app"
        assert announce["version"] == "1.2.0"
        assert announce["hashtag"] == "app"
        assert announce["url"] == "https://github.com/acme/app/releases/tag/v1.2.0"

    def test_explicit_candidate(self):
        send = FakeSender()
        SdkmanChannel(make_context(), _config(candidate=" tool ", hashtag="#tool"), send).execute()
        assert all(c["payload"]["candidate"] == "tool" for c in send.calls)
        assert send.calls[-1]["payload"]["hashtag"] == "#tool"

    def test_dry_run_makes_no_calls(self):
        send = FakeSender()
        logger = RecordingLogger()
        SdkmanChannel(make_context(logger=logger, dry_run=True), _config(), send).execute()
        assert send.calls == []
        assert any("major" in m for m in logger.messages("info"))

    def test_nothing_to_announce_is_a_warning(self):
        dists = {"jar": Distribution("jar", DistributionType.SINGLE_JAR, (Artifact("app.jar"),))}
        send = FakeSender()
        logger = RecordingLogger()
        context = make_context(make_model(distributions=dists), logger=logger)
        SdkmanChannel(context, _config(), send).execute()
        assert send.calls == []
        assert "No suitable artifacts were found. Skipping" in logger.messages("warning")

    def test_api_failure_wrapped(self):
        send = FakeSender(fail_with=HttpError("u", "HTTP 401 from u: nope", 401))
        with pytest.raises(AnnounceError) as exc_info:
            SdkmanChannel(make_context(), _config(), send).execute()
        assert exc_info.value.channel == "sdkman"
        assert isinstance(exc_info.value.cause, HttpError)
        assert len(send.calls) == 1


def test_snapshots_not_supported():
    assert SdkmanChannel(make_context(), _config()).is_snapshot_supported() is False


def test_enabled_flag():
    assert SdkmanChannel(make_context(), _config()).is_enabled() is True
    assert SdkmanChannel(make_context(), SdkmanConfig()).is_enabled() is False


class TestValidate:
    def test_missing_credentials(self, monkeypatch):
        monkeypatch.delenv("SDKMAN_CONSUMER_KEY", raising=False)
        monkeypatch.delenv("SDKMAN_CONSUMER_TOKEN", raising=False)
        result = sdkman.validate(SdkmanConfig(enabled=True), make_context())
        assert isinstance(result, Err)
        assert isinstance(result.error, ConfigurationError)
        assert len(result.error.problems) == 2

    def test_credentials_from_environment(self, monkeypatch):
        monkeypatch.setenv("SDKMAN_CONSUMER_KEY", "env-key")
        monkeypatch.setenv("SDKMAN_CONSUMER_TOKEN", "env-token")
        result = sdkman.validate(SdkmanConfig(enabled=True), make_context())
        assert isinstance(result, Ok)

    def test_disabled_needs_no_credentials(self, monkeypatch):
        monkeypatch.delenv("SDKMAN_CONSUMER_KEY", raising=False)
        assert isinstance(sdkman.validate(SdkmanConfig(), make_context()), Ok)


def test_as_dict_masks_secrets(monkeypatch):
    monkeypatch.delenv("SDKMAN_CONSUMER_TOKEN", raising=False)
    view = SdkmanConfig(enabled=True, consumer_key="supersecret").as_dict()
    assert view["consumerKey"] == "************"
    assert view["consumerToken"] == "**unset**"
    assert "supersecret" not in str(view)
