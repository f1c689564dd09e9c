"""Exception hierarchy for the release pipeline.

- ReleaseError: base for everything the pipeline raises on purpose
- ConfigurationError: a release file or channel block is invalid
- TemplateError: a labelled template could not be rendered
- DistributionError: checksum/prepare/package failed for one distribution
- AnnounceError: a channel failed to announce
- StageError: aggregate of every item failure in a non-fail-fast stage
"""

from __future__ import annotations

from dataclasses import dataclass, field


class ReleaseError(Exception):
    """Base exception for all release pipeline errors."""


class ConfigurationError(ReleaseError):
    """Raised when configuration is invalid, before any stage runs."""

    def __init__(self, message: str, problems: list[str] | None = None) -> None:
        self.problems = list(problems or [])
        if self.problems:
            message = message + "\n" + "\n".join(f"  - {p}" for p in self.problems)
        super().__init__(message)


class TemplateError(ReleaseError):
    """Raised when a template bound to an error label fails to render."""

    def __init__(self, label: str, cause: Exception) -> None:
        self.label = label
        self.cause = cause
        super().__init__(f"Unable to render template {label!r}: {cause}")


class DistributionError(ReleaseError):
    """Raised by a distribution processor for a single distribution."""

    def __init__(self, distribution: str, message: str) -> None:
        self.distribution = distribution
        super().__init__(f"Distribution {distribution}: {message}")


class AnnounceError(ReleaseError):
    """Raised by a channel; wraps the lower-level cause."""

    def __init__(self, channel: str, cause: Exception | str) -> None:
        self.channel = channel
        self.cause = cause if isinstance(cause, Exception) else None
        super().__init__(f"Unexpected error when announcing to {channel}: {cause}")


@dataclass(frozen=True)
class ItemFailure:
    """A single failed item of a stage."""
    name: str
    error: Exception


@dataclass(frozen=True)
class PipelineOutcome:
    """Result of one stage. No failures means full success."""
    stage: str
    attempted: tuple[str, ...] = ()
    failures: tuple[ItemFailure, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def failed_names(self) -> list[str]:
        return [f.name for f in self.failures]


class StageError(ReleaseError):
    """Aggregate failure raised when fail-fast is off and items failed."""

    def __init__(self, outcome: PipelineOutcome) -> None:
        self.outcome = outcome
        lines = [f"  - {f.name}: {f.error}" for f in outcome.failures]
        super().__init__(
            f"{outcome.stage} failed for {len(outcome.failures)} item(s):\n" + "\n".join(lines)
        )
