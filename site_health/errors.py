"""site_health.errors: иерархия исключений краулера SiteHealth."""

from __future__ import annotations

__all__ = [
    "SiteHealthError",
    "NavigationError",
    "NavigationTimeout",
    "EngineUnavailable",
    "PersistenceError",
]


class SiteHealthError(Exception):
    """Base class for all errors raised by the crawler."""


class NavigationError(SiteHealthError):
    """Page could not be rendered: non-2xx status, DNS failure or browser fault."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{reason} ({url})")
        self.url = url
        self.reason = reason


class NavigationTimeout(NavigationError):
    """Navigation did not finish within its timeout."""

    def __init__(self, url: str, timeout_ms: int) -> None:
        super().__init__(url, f"Navigation timed out after {timeout_ms} ms")
        self.timeout_ms = timeout_ms


class EngineUnavailable(SiteHealthError):
    """Render engine failed to start or was already released."""


class PersistenceError(SiteHealthError):
    """Issue store write or read failed."""
