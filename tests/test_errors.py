"""Tests for the error types and the Ok/Err result."""

import pytest

from kerygma_release.errors import (
    AnnounceError,
    ConfigurationError,
    ItemFailure,
    PipelineOutcome,
    StageError,
)
from kerygma_release.result import Err, Ok


def test_configuration_error_lists_problems():
    exc = ConfigurationError("Announce configuration is invalid", ["a is blank", "b is blank"])
    assert exc.problems == ["a is blank", "b is blank"]
    assert str(exc).splitlines()[1:] == ["  - a is blank", "  - b is blank"]


def test_announce_error_keeps_cause():
    cause = RuntimeError("boom")
    exc = AnnounceError("twitter", cause)
    assert exc.channel == "twitter"
    assert exc.cause is cause
    assert "twitter" in str(exc)
    assert AnnounceError("twitter", "plain text").cause is None


def test_stage_error_enumerates_failures():
    outcome = PipelineOutcome(
        stage="announce",
        attempted=("discord", "twitter"),
        failures=(ItemFailure("twitter", RuntimeError("401")),),
    )
    exc = StageError(outcome)
    assert not outcome.ok
    assert outcome.failed_names == ["twitter"]
    assert "announce failed for 1 item(s)" in str(exc)
    assert "twitter: 401" in str(exc)


def test_result_variants():
    assert Ok(3).is_ok() and Ok(3).unwrap() == 3
    err = Err(ValueError("nope"))
    assert not err.is_ok()
    with pytest.raises(ValueError, match="nope"):
        err.unwrap()
