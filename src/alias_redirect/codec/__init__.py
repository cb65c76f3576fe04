"""Alias record codec boundary and platform implementations."""

from __future__ import annotations

import importlib
import logging
import sys

from alias_redirect.codec.base import CONTAINER_KINDS, SCANNABLE_ROOT_KINDS, EntryKind, ReferenceCodec
from alias_redirect.errors import UnsupportedPlatformError


def build_platform_codec(logger: logging.Logger | None = None) -> ReferenceCodec:
    """Return the alias codec for the running platform."""

    if sys.platform != "darwin":
        raise UnsupportedPlatformError(f"Finder alias records are only supported on macOS (platform={sys.platform}).")
    try:
        bookmark = importlib.import_module("alias_redirect.codec.bookmark")
    except ImportError as exc:
        raise UnsupportedPlatformError(f"pyobjc Foundation/AppKit bridges are not installed: {exc}") from exc
    return bookmark.BookmarkCodec(bookmark.probe_capabilities(logger=logger))


__all__ = [
    "CONTAINER_KINDS",
    "SCANNABLE_ROOT_KINDS",
    "EntryKind",
    "ReferenceCodec",
    "build_platform_codec",
]
