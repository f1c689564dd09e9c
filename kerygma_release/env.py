"""Secret resolution with environment fallback.

An explicitly configured value always wins; otherwise the named
environment variable is used. Resolved values are never logged;
diagnostic views go through mask().
"""

from __future__ import annotations

import os
from typing import Mapping

MASKED = "************"
UNSET = "**unset**"


def resolve(env_var: str, configured: str | None, environ: Mapping[str, str] | None = None) -> str:
    if configured is not None and configured.strip():
        return configured
    source = os.environ if environ is None else environ
    return source.get(env_var, "") or ""


def mask(value: str | None) -> str:
    """Display form of a secret: never its length or content."""
    if value is not None and value.strip():
        return MASKED
    return UNSET
