"""Release file loader.

Loads the YAML release file into a Model plus run settings, with
environment variable overrides. Run settings use the KERYGMA_ prefix:
  KERYGMA_PROJECT_VERSION → project.version
  KERYGMA_DRY_RUN         → dry_run
  KERYGMA_FAIL_FAST       → fail_fast
  KERYGMA_OUTPUT_DIR      → output_dir
  KERYGMA_LOG_LEVEL       → logging.level
Channel credentials are not read here; each channel resolves its own
secrets (SDKMAN_CONSUMER_KEY, TWITTER_ACCESS_TOKEN, ...) when used.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from kerygma_release.bluesky import BlueskyConfig
from kerygma_release.discord import DiscordConfig
from kerygma_release.errors import ConfigurationError
from kerygma_release.factory import AnnounceConfig
from kerygma_release.mastodon import MastodonConfig
from kerygma_release.model import (
    SERVICE_KINDS,
    Artifact,
    Distribution,
    DistributionType,
    Model,
    Project,
    ReleaseService,
)
from kerygma_release.sdkman import SdkmanConfig
from kerygma_release.twitter import TwitterConfig

ENV_PREFIX = "KERYGMA_"

_CHANNEL_CONFIGS: dict[str, type] = {
    "sdkman": SdkmanConfig,
    "twitter": TwitterConfig,
    "discord": DiscordConfig,
    "mastodon": MastodonConfig,
    "bluesky": BlueskyConfig,
}


@dataclass
class ReleaseConfig:
    model: Model
    dry_run: bool = False
    fail_fast: bool = True
    output_dir: str = "out/kerygma"
    log_level: str = "INFO"
    log_format: str = "plain"


def load_config(path: Path | None = None) -> ReleaseConfig:
    """Load a release file; a missing file yields an empty project.

    Raises:
        ConfigurationError: If the file is not valid YAML or a section is malformed.
    """
    raw: dict[str, Any] = {}
    if path and path.exists():
        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Cannot parse {path}: {exc}") from exc
        if not isinstance(loaded, dict):
            raise ConfigurationError(f"{path} must contain a mapping at the top level")
        raw = loaded

    logging_cfg = _section(raw, "logging")
    model = Model(
        project=_parse_project(_section(raw, "project")),
        release=_parse_release(_section(raw, "release")),
        distributions=_parse_distributions(_section(raw, "distributions")),
        announce=_parse_announce(_section(raw, "announce")),
    )

    return ReleaseConfig(
        model=model,
        dry_run=_env_bool("DRY_RUN", _flag(raw, "dry_run", False)),
        fail_fast=_env_bool("FAIL_FAST", _flag(raw, "fail_fast", True)),
        output_dir=_env_or("OUTPUT_DIR", str(raw.get("output_dir", "out/kerygma"))),
        log_level=_env_or("LOG_LEVEL", str(logging_cfg.get("level", "INFO"))),
        log_format=str(logging_cfg.get("format", "plain")),
    )


def describe_config(cfg: ReleaseConfig) -> dict[str, Any]:
    """A display-safe view of the configuration: secrets are masked."""
    model = cfg.model
    return {
        "project": {
            "name": model.project.name,
            "version": model.project.version,
            "snapshot": model.project.is_snapshot,
        },
        "release": {
            "kind": model.release.kind,
            "host": model.release.resolved_host,
            "owner": model.release.owner,
            "name": model.release.name,
        },
        "distributions": {
            name: {
                "type": dist.type.value,
                "artifacts": [{"path": a.path, "platform": a.platform} for a in dist.artifacts],
            }
            for name, dist in model.distributions.items()
        },
        "announce": (model.announce or AnnounceConfig()).as_dict(),
        "dry_run": cfg.dry_run,
        "fail_fast": cfg.fail_fast,
        "output_dir": cfg.output_dir,
    }


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"'{key}' must be a mapping")
    return value


def _parse_project(raw: dict[str, Any]) -> Project:
    authors = raw.get("authors") or []
    if isinstance(authors, str):
        authors = [authors]
    snapshot = raw.get("snapshot")
    if snapshot is not None and not isinstance(snapshot, bool):
        raise ConfigurationError(f"project.snapshot must be true or false, got {snapshot!r}")
    return Project(
        name=str(raw.get("name", "")),
        version=_env_or("PROJECT_VERSION", str(raw.get("version", ""))),
        description=str(raw.get("description", "")),
        website=str(raw.get("website", "")),
        authors=tuple(str(a) for a in authors),
        snapshot=snapshot,
    )


def _parse_release(raw: dict[str, Any]) -> ReleaseService:
    kind = str(raw.get("kind", "github")).lower()
    if kind not in SERVICE_KINDS:
        raise ConfigurationError(f"release.kind must be one of {', '.join(SERVICE_KINDS)}, got {kind!r}")
    return ReleaseService(
        kind=kind,
        owner=str(raw.get("owner", "")),
        name=str(raw.get("name", "")),
        host=str(raw.get("host", "")),
        tag_name=str(raw.get("tag_name", "v{{projectVersion}}")),
        release_notes_url=str(raw.get("release_notes_url", "")),
        download_url=str(raw.get("download_url", "")),
    )


def _parse_distributions(raw: dict[str, Any]) -> dict[str, Distribution]:
    distributions: dict[str, Distribution] = {}
    for name, body in raw.items():
        body = body or {}
        type_name = str(body.get("type", "BINARY")).upper()
        try:
            dist_type = DistributionType(type_name)
        except ValueError:
            valid = ", ".join(t.value for t in DistributionType)
            raise ConfigurationError(
                f"distributions.{name}.type {type_name!r} is not one of {valid}"
            ) from None

        artifacts = []
        for index, entry in enumerate(body.get("artifacts") or []):
            if isinstance(entry, str):
                entry = {"path": entry}
            if not isinstance(entry, dict) or not entry.get("path"):
                raise ConfigurationError(f"distributions.{name}.artifacts[{index}] needs a path")
            artifacts.append(Artifact(
                path=str(entry["path"]),
                platform=str(entry.get("platform") or ""),
                checksum=entry.get("checksum"),
            ))
        distributions[str(name)] = Distribution(name=str(name), type=dist_type, artifacts=tuple(artifacts))
    return distributions


def _parse_announce(raw: dict[str, Any]) -> AnnounceConfig:
    blocks: dict[str, Any] = {}
    for name, body in raw.items():
        config_cls = _CHANNEL_CONFIGS.get(name)
        if config_cls is None:
            raise ConfigurationError(
                f"Unknown announce channel {name!r}; expected one of {', '.join(_CHANNEL_CONFIGS)}"
            )
        body = body or {}
        if not isinstance(body, dict):
            raise ConfigurationError(f"announce.{name} must be a mapping")
        known = {f.name: f.type for f in fields(config_cls)}
        unknown = sorted(set(body) - set(known))
        if unknown:
            raise ConfigurationError(f"announce.{name} has unknown keys: {', '.join(unknown)}")
        values = {
            key: _typed(f"announce.{name}.{key}", known[key], value)
            for key, value in body.items()
            if value is not None
        }
        blocks[name] = config_cls(**values)
    return AnnounceConfig(order=tuple(blocks), **blocks)


def _typed(where: str, expected: Any, value: Any) -> Any:
    """Check a YAML value against a config field type (annotations are strings here)."""
    expected = getattr(expected, "__name__", expected)
    if expected == "bool":
        if not isinstance(value, bool):
            raise ConfigurationError(f"{where} must be true or false, got {value!r}")
        return value
    if expected == "int":
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(f"{where} must be an integer, got {value!r}")
        return value
    if isinstance(value, (bool, dict, list)):
        raise ConfigurationError(f"{where} must be a string, got {value!r}")
    return str(value)


def _flag(raw: dict[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key, default)
    if value is None:
        return default
    return _typed(key, "bool", value)


def _env_or(suffix: str, default: str) -> str:
    return os.environ.get(f"{ENV_PREFIX}{suffix}", default)


def _env_bool(suffix: str, default: bool) -> bool:
    val = os.environ.get(f"{ENV_PREFIX}{suffix}")
    if val is None:
        return default
    return val.lower() in ("true", "1", "yes")
