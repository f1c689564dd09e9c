"""CLI entry point for kerygma-release.

Usage:
    kerygma-release [--config FILE] [--dry-run] checksum
    kerygma-release prepare
    kerygma-release package
    kerygma-release announce
    kerygma-release release [--skip STAGE ...]
    kerygma-release config
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import yaml

from kerygma_release.config import ReleaseConfig, describe_config, load_config
from kerygma_release.errors import ReleaseError, StageError
from kerygma_release.factory import build_channels
from kerygma_release.logging import get_logger, setup_logging
from kerygma_release.model import ReleaseContext
from kerygma_release.pipeline import PipelineReport, ReleasePipeline, Stage
from kerygma_release.processor import LocalDistributionProcessor

DEFAULT_CONFIG = Path("kerygma.yml")


def build_pipeline(cfg: ReleaseConfig, base_dir: Path, with_channels: bool) -> ReleasePipeline:
    logger = get_logger("kerygma_release", project=cfg.model.project.name)
    context = ReleaseContext(model=cfg.model, logger=logger, dry_run=cfg.dry_run)
    output_dir = Path(cfg.output_dir)
    if not output_dir.is_absolute():
        output_dir = base_dir / output_dir
    processor = LocalDistributionProcessor(output_dir, base_dir=base_dir, logger=logger, dry_run=cfg.dry_run)
    # channels are validated before any stage runs
    channels = build_channels(context) if with_channels else []
    return ReleasePipeline(context, processor, channels, fail_fast=cfg.fail_fast)


def print_report(report: PipelineReport) -> None:
    for stage in report.skipped:
        print(f"  [SKIPPED] {stage.value}")
    for outcome in report.outcomes:
        names = ", ".join(outcome.attempted) or "nothing to do"
        print(f"  [OK] {outcome.stage}: {names}")


def cmd_stage(pipeline: ReleasePipeline, stage: Stage) -> None:
    outcome = getattr(pipeline, stage.value)()
    print_report(PipelineReport(outcomes=[outcome]))


def cmd_release(pipeline: ReleasePipeline, skip: list[str]) -> None:
    report = pipeline.run(skip=[Stage(s) for s in skip])
    print_report(report)


def cmd_config(cfg: ReleaseConfig) -> None:
    print(yaml.safe_dump(describe_config(cfg), sort_keys=False, allow_unicode=True), end="")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="kerygma-release", description="Release pipeline and announcer")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG, help="Release YAML file")
    parser.add_argument("--dry-run", action="store_true", default=None,
                        help="Resolve and validate everything but make no remote calls")
    parser.add_argument("--fail-fast", action=argparse.BooleanOptionalAction, default=None,
                        help="Stop a stage at its first failure")
    parser.add_argument("--output-dir", default=None)
    parser.add_argument("--log-level", default=None)
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("checksum", help="Calculate artifact checksums")
    sub.add_parser("prepare", help="Prepare all distributions")
    sub.add_parser("package", help="Package all distributions")
    sub.add_parser("announce", help="Announce the release on every enabled channel")
    release_p = sub.add_parser("release", help="Run checksum, prepare, package and announce")
    release_p.add_argument("--skip", action="append", default=[], choices=[s.value for s in Stage])
    sub.add_parser("config", help="Show the resolved configuration with secrets masked")

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    try:
        cfg = load_config(args.config)
        if args.dry_run is not None:
            cfg.dry_run = args.dry_run
        if args.fail_fast is not None:
            cfg.fail_fast = args.fail_fast
        if args.output_dir:
            cfg.output_dir = args.output_dir
        if args.log_level:
            cfg.log_level = args.log_level
        setup_logging(cfg.log_level, cfg.log_format)

        if args.command == "config":
            cmd_config(cfg)
            return 0

        base_dir = args.config.resolve().parent
        wants_channels = args.command in ("announce", "release")
        pipeline = build_pipeline(cfg, base_dir, with_channels=wants_channels)
        if args.command == "release":
            cmd_release(pipeline, args.skip)
        else:
            cmd_stage(pipeline, Stage(args.command))
    except StageError as exc:
        print(f"  [FAILED] {exc.outcome.stage}", file=sys.stderr)
        for failure in exc.outcome.failures:
            print(f"    {failure.name}: {failure.error}", file=sys.stderr)
        return 1
    except (ReleaseError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
