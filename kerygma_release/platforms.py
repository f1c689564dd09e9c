"""Map free-form artifact platform tags to a channel's platform keys.

A PlatformTable is an ordered list of rules evaluated top to bottom on
the lower-cased tag; the first matching rule wins. A blank tag maps to
the table's fallback key and an unmatched tag maps to None, which
callers treat as "unsupported here, skip the artifact".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class PlatformRule:
    description: str
    predicate: Callable[[str], bool]
    key: str


@dataclass(frozen=True)
class PlatformTable:
    fallback: str
    rules: tuple[PlatformRule, ...]

    def classify(self, raw: str | None) -> str | None:
        if raw is None or not raw.strip():
            return self.fallback
        tag = raw.lower()
        for rule in self.rules:
            if rule.predicate(tag):
                return rule.key
        return None


def _has(*needles: str) -> Callable[[str], bool]:
    return lambda tag: any(n in tag for n in needles)


def _both(first: Callable[[str], bool], second: Callable[[str], bool]) -> Callable[[str], bool]:
    return lambda tag: first(tag) and second(tag)


_mac = _has("mac", "osx")
_linux = _has("linux")

SDKMAN_PLATFORMS = PlatformTable(
    fallback="UNIVERSAL",
    rules=(
        PlatformRule("macOS on arm", _both(_mac, _has("arm")), "MAC_ARM64"),
        PlatformRule("macOS", _mac, "MAC_OSX"),
        PlatformRule("windows", _has("win"), "WINDOWS_64"),
        PlatformRule("linux x86 64-bit", _both(_linux, _has("x86_64")), "LINUX_64"),
        PlatformRule("linux x86 32-bit", _both(_linux, _has("x86_32")), "LINUX_32"),
        # arm width is not recoverable from the tag; always the 32-bit key
        PlatformRule("linux arm", _both(_linux, _has("arm")), "LINUX_ARM32"),
        PlatformRule("linux", _linux, "LINUX_32"),
    ),
)


def classify(raw: str | None, table: PlatformTable = SDKMAN_PLATFORMS) -> str | None:
    return table.classify(raw)
