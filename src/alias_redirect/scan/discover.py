"""Depth-first discovery of alias files under a root path."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterator

from alias_redirect.codec.base import CONTAINER_KINDS, SCANNABLE_ROOT_KINDS, ReferenceCodec
from alias_redirect.errors import RootNotScannableError
from alias_redirect.models import ScanConfig

LOGGER = logging.getLogger(__name__)

ScanErrorHandler = Callable[[Path, OSError], None]


def _follow_root(root: Path) -> Path:
    """Resolve a symlinked root; entries below it are still never followed."""

    return Path(os.path.realpath(root)) if os.path.islink(root) else root


def check_root(root: Path, codec: ReferenceCodec) -> None:
    """Raise when the root can neither be walked nor treated as a single alias."""

    if not os.path.lexists(root):
        raise RootNotScannableError(f"Root path not found: {root}")
    root = _follow_root(root)
    kind = codec.classify(root)
    if kind in SCANNABLE_ROOT_KINDS:
        if not os.access(root, os.R_OK | os.X_OK):
            raise RootNotScannableError(f"Root directory is not readable: {root}")
        return
    if kind in ("indirection_record", "package"):
        return
    raise RootNotScannableError(f"Root is not a directory, volume, or alias file: {root} (kind={kind})")


def _walk_container(
    directory: Path,
    codec: ReferenceCodec,
    include_package_contents: bool,
    on_error: ScanErrorHandler | None,
    logger: logging.Logger,
) -> Iterator[Path]:
    try:
        with os.scandir(directory) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)
    except OSError as exc:
        logger.warning("scan.directory_unreadable path=%s error=%s", directory, exc)
        if on_error is not None:
            on_error(directory, exc)
        return

    for entry in entries:
        if entry.is_symlink():
            continue
        entry_path = Path(entry.path)
        kind = codec.classify(entry_path)
        if kind == "indirection_record":
            yield entry_path
        elif kind in CONTAINER_KINDS:
            if kind == "package" and not include_package_contents:
                logger.debug("scan.package_skipped path=%s", entry_path)
                continue
            yield from _walk_container(entry_path, codec, include_package_contents, on_error, logger)


def scan_aliases(
    root: Path,
    codec: ReferenceCodec,
    *,
    include_package_contents: bool = False,
    on_error: ScanErrorHandler | None = None,
    logger: logging.Logger | None = None,
) -> Iterator[Path]:
    """Yield alias files under ``root`` lazily, in depth-first order.

    A root that is itself an alias file yields exactly that path. Package
    directories are opaque unless ``include_package_contents`` is set, and
    an unreadable directory only ends the walk of its own subtree.
    """

    effective_logger = logger or LOGGER
    root = _follow_root(root)
    kind = codec.classify(root)
    if kind == "indirection_record":
        yield root
        return
    if kind in SCANNABLE_ROOT_KINDS or (kind == "package" and include_package_contents):
        yield from _walk_container(root, codec, include_package_contents, on_error, effective_logger)
        return
    effective_logger.info("scan.root_not_scannable root=%s kind=%s", root, kind)


def scan_candidates(
    config: ScanConfig,
    codec: ReferenceCodec,
    *,
    on_error: ScanErrorHandler | None = None,
    logger: logging.Logger | None = None,
) -> Iterator[Path]:
    """Run ``scan_aliases`` with the parameters of a ``ScanConfig``."""

    return scan_aliases(
        config.root_path,
        codec,
        include_package_contents=config.include_package_contents,
        on_error=on_error,
        logger=logger,
    )
