"""Exception types raised across the alias redirect toolchain."""

from __future__ import annotations

from pathlib import Path


class AliasRedirectError(Exception):
    """Base class for alias redirect failures."""


class ReferenceCodecError(AliasRedirectError):
    """A platform codec operation failed, optionally for a specific file."""

    def __init__(self, path: Path | str | None, operation: str, reason: str) -> None:
        self.path = Path(path) if path is not None else None
        self.operation = operation
        self.reason = reason
        message = f"{operation} failed - {reason}"
        super().__init__(f"{self.path}: {message}" if self.path is not None else message)


class ResolutionTimeoutError(AliasRedirectError):
    """Resolution did not finish within the configured bound."""

    def __init__(self, path: Path | str, timeout_sec: float) -> None:
        self.path = Path(path)
        self.timeout_sec = timeout_sec
        super().__init__(f"{self.path}: resolution timed out after {timeout_sec:g}s")


class RootNotScannableError(AliasRedirectError):
    """The configured root cannot produce any candidates."""


class UnsupportedPlatformError(AliasRedirectError):
    """The platform alias codec is not available on this system."""
