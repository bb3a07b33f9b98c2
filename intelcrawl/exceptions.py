"""Custom exceptions for intelcrawl services."""

from typing import Optional

from intelcrawl.domain.error_kind import ErrorKind


class SeedConfigError(Exception):
    """Raised when a seed config file is missing or fails validation."""

    def __init__(self, config_path: str, reason: str = "not found"):
        self.config_path = config_path
        self.reason = reason
        super().__init__(f"Seed config '{config_path}' {reason}")


class CrawlPreconditionError(ValueError):
    """Raised before any network activity when a crawl run cannot start."""


class FetchError(Exception):
    """Raised inside the fetch layer; carries a structured `ErrorKind`."""

    def __init__(self, url: str, kind: ErrorKind, original: Optional[Exception] = None, status_code: Optional[int] = None):
        self.url = url
        self.kind = kind
        self.original = original
        self.status_code = status_code
        detail = original if original is not None else f"status {status_code}"
        super().__init__(f"Fetch failed for {url} [{kind.value}]: {detail}")


class CrawlAlreadyRunningError(RuntimeError):
    """Raised when a crawl is requested while another one is still in flight."""

    def __init__(self, active_id: str):
        self.active_id = active_id
        super().__init__(f"Crawl {active_id} is already running")
