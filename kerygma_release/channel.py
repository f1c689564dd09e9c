"""The announce channel contract and helpers shared by every variant.

A channel is any object with a stable ``name`` and the three methods
below. Variants are independent classes; the registry in factory.py
decides which ones exist based on which config blocks are present.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable

from kerygma_release.model import ReleaseContext
from kerygma_release.retry import RetryConfig, retry
from kerygma_release.templates import render


@runtime_checkable
class Channel(Protocol):
    name: str

    def is_enabled(self) -> bool: ...

    def is_snapshot_supported(self) -> bool: ...

    def execute(self) -> None:
        """Announce the release. Raises AnnounceError; no outbound call on dry run."""
        ...


def resolve_message(context: ReleaseContext, template: str, label: str) -> str:
    return render(template, context.model.props(), label)


def call_remote(
    context: ReleaseContext,
    channel: str,
    func: Callable[..., Any],
    *args: Any,
    retry_config: RetryConfig | None = None,
    **kwargs: Any,
) -> Any:
    """Run one outbound call for a channel, or log it and return None on dry run."""
    if context.dry_run:
        context.logger.info("[dryrun] %s: skipping remote call", channel)
        return None
    return retry(func, retry_config, None, *args, **kwargs)

