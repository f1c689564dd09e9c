"""kerygma-release: release pipeline and multi-channel release announcer.

Runs checksum, prepare and package over a release's distributions, then
announces the release on every enabled channel (SDKMAN!, Twitter,
Discord, Mastodon, Bluesky).
"""

__version__ = "0.1.0"

from kerygma_release.config import load_config, ReleaseConfig
from kerygma_release.errors import (
    AnnounceError,
    ConfigurationError,
    DistributionError,
    PipelineOutcome,
    ReleaseError,
    StageError,
)
from kerygma_release.factory import AnnounceConfig, build_channels
from kerygma_release.model import Artifact, Distribution, DistributionType, Model, Project, ReleaseContext
from kerygma_release.pipeline import ReleasePipeline, Stage

__all__ = [
    "load_config",
    "ReleaseConfig",
    "AnnounceError",
    "ConfigurationError",
    "DistributionError",
    "PipelineOutcome",
    "ReleaseError",
    "StageError",
    "AnnounceConfig",
    "build_channels",
    "Artifact",
    "Distribution",
    "DistributionType",
    "Model",
    "Project",
    "ReleaseContext",
    "ReleasePipeline",
    "Stage",
]
