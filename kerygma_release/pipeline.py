"""The release pipeline: checksum, prepare, package, announce.

The first three stages hand each distribution to a DistributionProcessor;
the announce stage hands each applicable channel to its own execute().
Both go through run_stage with the pipeline's fail_fast policy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Protocol

from kerygma_release.channel import Channel
from kerygma_release.errors import PipelineOutcome
from kerygma_release.model import Distribution, ReleaseContext
from kerygma_release.stage import run_stage


class Stage(Enum):
    CHECKSUM = "checksum"
    PREPARE = "prepare"
    PACKAGE = "package"
    ANNOUNCE = "announce"


class DistributionProcessor(Protocol):
    def checksum_distribution(self, distribution: Distribution) -> None: ...

    def prepare_distribution(self, distribution: Distribution) -> None: ...

    def package_distribution(self, distribution: Distribution) -> None: ...


@dataclass
class PipelineReport:
    outcomes: list[PipelineOutcome] = field(default_factory=list)
    skipped: list[Stage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(o.ok for o in self.outcomes)


class ReleasePipeline:
    """Single entry point for front ends."""

    def __init__(
        self,
        context: ReleaseContext,
        processor: DistributionProcessor,
        channels: Iterable[Channel] | Callable[[ReleaseContext], Iterable[Channel]] = (),
        fail_fast: bool = True,
    ) -> None:
        self._context = context
        self._processor = processor
        self._channels = channels if callable(channels) else list(channels)
        self._fail_fast = fail_fast

    @property
    def context(self) -> ReleaseContext:
        return self._context

    def _distributions(self) -> list[Distribution]:
        return list(self._context.model.distributions.values())

    def checksum(self) -> PipelineOutcome:
        return run_stage(
            Stage.CHECKSUM.value, self._distributions(),
            self._processor.checksum_distribution, self._fail_fast, self._context.logger,
        )

    def prepare(self) -> PipelineOutcome:
        return run_stage(
            Stage.PREPARE.value, self._distributions(),
            self._processor.prepare_distribution, self._fail_fast, self._context.logger,
        )

    def package(self) -> PipelineOutcome:
        return run_stage(
            Stage.PACKAGE.value, self._distributions(),
            self._processor.package_distribution, self._fail_fast, self._context.logger,
        )

    def applicable_channels(self) -> list[Channel]:
        log = self._context.logger
        channels = self._channels(self._context) if callable(self._channels) else self._channels
        snapshot = self._context.model.project.is_snapshot
        selected: list[Channel] = []
        for channel in channels:
            if not channel.is_enabled():
                log.debug("%s is disabled. Skipping", channel.name)
                continue
            if snapshot and not channel.is_snapshot_supported():
                log.info("%s does not support snapshot releases. Skipping", channel.name)
                continue
            selected.append(channel)
        return selected

    def announce(self) -> PipelineOutcome:
        channels = self.applicable_channels()
        if not channels:
            self._context.logger.info("No announce channels are enabled")
        return run_stage(
            Stage.ANNOUNCE.value, channels,
            lambda channel: channel.execute(), self._fail_fast, self._context.logger,
        )

    def run(self, skip: Iterable[Stage] = ()) -> PipelineReport:
        """Run every stage in order except those in skip.

        Raises whatever the first failing stage raises; stages after it do not run.
        """
        skipped = set(skip)
        steps = {
            Stage.CHECKSUM: self.checksum,
            Stage.PREPARE: self.prepare,
            Stage.PACKAGE: self.package,
            Stage.ANNOUNCE: self.announce,
        }
        report = PipelineReport()
        self._context.logger.info("dryrun set to %s", self._context.dry_run)
        for stage in Stage:
            if stage in skipped:
                self._context.logger.info("Skipping %s", stage.value)
                report.skipped.append(stage)
                continue
            report.outcomes.append(steps[stage]())
        return report
