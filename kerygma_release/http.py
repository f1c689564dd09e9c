"""JSON-over-HTTP helper shared by the announce channels."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from typing import Any, Callable

DEFAULT_TIMEOUT = 30.0

Sender = Callable[..., dict[str, Any]]


class HttpError(RuntimeError):
    """Non-2xx response or connection failure."""

    def __init__(self, url: str, message: str, status: int | None = None) -> None:
        self.url = url
        self.status = status
        super().__init__(message)


def send_json(
    url: str,
    payload: dict[str, Any] | None,
    headers: dict[str, str] | None = None,
    method: str = "POST",
    timeout: float = DEFAULT_TIMEOUT,
) -> dict[str, Any]:
    """Send payload as JSON and decode the JSON response (empty body -> status only)."""
    data = json.dumps(payload).encode("utf-8") if payload is not None else None
    req = urllib.request.Request(
        url,
        data=data,
        headers={"Content-Type": "application/json", "Accept": "application/json", **(headers or {})},
        method=method,
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            body = resp.read().decode("utf-8")
            if body:
                return json.loads(body)
            return {"ok": True, "status": resp.status}
    except urllib.error.HTTPError as exc:
        body = exc.read().decode("utf-8", errors="replace")
        raise HttpError(url, f"HTTP {exc.code} from {url}: {body}", exc.code) from exc
    except urllib.error.URLError as exc:
        raise HttpError(url, f"Connection error for {url}: {exc.reason}") from exc
